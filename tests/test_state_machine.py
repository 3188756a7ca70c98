import pytest

from jobbot.core.exceptions import InvalidTransitionError
from jobbot.flow.events import AddChannelCommand, StartCommand, TextMessage
from jobbot.flow.machine import check_transition, transition
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord
from utils.constants import PREFERENCE_KEYBOARD

from conftest import noop_probe


def record(**fields):
    return UserRecord(**fields)


@pytest.mark.asyncio
async def test_text_before_start_is_ignored():
    original = UserRecord()
    result = await transition(original, TextMessage("hello"), noop_probe)

    assert result.record == original
    assert result.messages == []


@pytest.mark.asyncio
async def test_start_greets_and_asks_first_name():
    result = await transition(UserRecord(), StartCommand(display_name="Ann"), noop_probe)

    assert result.record.state == UserState.AWAITING_FIRST_NAME
    assert [m["text"] for m in result.messages] == [
        "👋 Welcome to JobBot, Ann!",
        "What is your first name?",
    ]


@pytest.mark.asyncio
async def test_start_without_display_name_uses_friend():
    result = await transition(UserRecord(), StartCommand(), noop_probe)

    assert result.messages[0]["text"] == "👋 Welcome to JobBot, friend!"


@pytest.mark.asyncio
async def test_first_name_is_recorded_verbatim():
    result = await transition(
        record(state=UserState.AWAITING_FIRST_NAME), TextMessage("  Ann Marie "), noop_probe
    )

    assert result.record.first_name == "  Ann Marie "
    assert result.record.state == UserState.AWAITING_LAST_NAME
    assert result.messages[0]["text"] == "Nice to meet you,   Ann Marie ! What is your last name?"


@pytest.mark.asyncio
async def test_last_name_shows_preference_keyboard():
    result = await transition(
        record(state=UserState.AWAITING_LAST_NAME, first_name="Ann"), TextMessage("Lee"), noop_probe
    )

    assert result.record.last_name == "Lee"
    assert result.record.state == UserState.AWAITING_PREFERENCES
    message = result.messages[0]
    assert message["type"] == "keyboard"
    assert message["text"] == "Thanks Ann Lee! Now let's set up job preferences."
    assert message["keyboard"] == PREFERENCE_KEYBOARD
    assert message["one_time"] is True


@pytest.mark.asyncio
async def test_preferences_keep_duplicates_in_order():
    current = record(state=UserState.AWAITING_PREFERENCES, first_name="Ann", last_name="Lee")
    for text in ["Remote", "Remote", "Contract"]:
        current = (await transition(current, TextMessage(text), noop_probe)).record

    assert current.preferences == ["Remote", "Remote", "Contract"]
    assert current.state == UserState.AWAITING_PREFERENCES


@pytest.mark.asyncio
async def test_preference_acknowledgement():
    result = await transition(
        record(state=UserState.AWAITING_PREFERENCES, first_name="A", last_name="B"),
        TextMessage("Full-time"),
        noop_probe,
    )

    assert result.messages[0]["text"] == 'Added Full-time preference. Select more or click "Done"'


@pytest.mark.asyncio
async def test_done_with_no_preferences_completes_setup():
    result = await transition(
        record(state=UserState.AWAITING_PREFERENCES, first_name="Ann", last_name="Lee"),
        TextMessage("Done"),
        noop_probe,
    )

    assert result.record.state == UserState.READY
    assert result.record.preferences == []
    assert result.messages[0]["type"] == "remove_keyboard"
    assert result.messages[0]["text"] == "Setup complete! Now add channels with /addchannel @channelname"


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["done", "DONE", "Done ", " Done"])
async def test_done_keyword_is_exact_and_case_sensitive(text):
    result = await transition(
        record(state=UserState.AWAITING_PREFERENCES, first_name="Ann", last_name="Lee"),
        TextMessage(text),
        noop_probe,
    )

    assert result.record.state == UserState.AWAITING_PREFERENCES
    assert result.record.preferences == [text]


@pytest.mark.asyncio
async def test_text_in_ready_state_is_ignored():
    ready = record(state=UserState.READY, first_name="Ann", last_name="Lee")
    result = await transition(ready, TextMessage("anything"), noop_probe)

    assert result.record == ready
    assert result.messages == []


@pytest.mark.asyncio
async def test_restart_keeps_previous_answers():
    before = record(
        state=UserState.AWAITING_PREFERENCES,
        first_name="Ann",
        last_name="Lee",
        preferences=["Remote"],
        channels=["news"],
    )
    result = await transition(before, StartCommand(display_name="Ann"), noop_probe)

    assert result.record.state == UserState.AWAITING_FIRST_NAME
    assert result.record.first_name == "Ann"
    assert result.record.last_name == "Lee"
    assert result.record.preferences == ["Remote"]
    assert result.record.channels == ["news"]


@pytest.mark.asyncio
async def test_transition_does_not_mutate_input():
    before = record(state=UserState.AWAITING_PREFERENCES, first_name="A", last_name="B")
    await transition(before, TextMessage("Remote"), noop_probe)

    assert before.preferences == []
    assert before.state == UserState.AWAITING_PREFERENCES


@pytest.mark.asyncio
async def test_unknown_event_type_raises():
    with pytest.raises(TypeError):
        await transition(UserRecord(), object(), noop_probe)


def test_check_transition_rejects_skipping_steps():
    with pytest.raises(InvalidTransitionError):
        check_transition(UserRecord(), record(state=UserState.READY, last_name="Lee"))


def test_check_transition_requires_first_name():
    with pytest.raises(InvalidTransitionError):
        check_transition(
            record(state=UserState.AWAITING_FIRST_NAME),
            record(state=UserState.AWAITING_LAST_NAME),
        )


class TestAddChannel:
    @pytest.mark.asyncio
    async def test_missing_argument_replies_usage(self):
        probed = []

        async def probe(channel):
            probed.append(channel)
            return True

        before = record(state=UserState.READY, first_name="A", last_name="B")
        result = await transition(before, AddChannelCommand(None), probe)

        assert result.record == before
        assert result.messages[0]["text"] == "Usage: /addchannel @channelname"
        assert probed == []

    @pytest.mark.asyncio
    async def test_bare_at_sign_counts_as_missing(self):
        result = await transition(UserRecord(), AddChannelCommand("@"), noop_probe)

        assert result.messages[0]["text"] == "Usage: /addchannel @channelname"

    @pytest.mark.asyncio
    async def test_adds_normalized_channel_in_any_state(self):
        probed = []

        async def probe(channel):
            probed.append(channel)
            return True

        result = await transition(UserRecord(), AddChannelCommand(" @news "), probe)

        assert probed == ["news"]
        assert result.record.channels == ["news"]
        assert result.record.state == UserState.NEW
        assert result.messages[0]["text"] == "✅ @news added successfully!"

    @pytest.mark.asyncio
    async def test_known_channel_is_not_added_twice(self):
        before = record(channels=["news"])
        result = await transition(before, AddChannelCommand("news"), noop_probe)

        assert result.record.channels == ["news"]
        assert result.messages[0]["text"] == "ℹ️ @news was already added."

    @pytest.mark.asyncio
    async def test_channels_are_case_sensitive(self):
        result = await transition(record(channels=["news"]), AddChannelCommand("@News"), noop_probe)

        assert result.record.channels == ["news", "News"]

    @pytest.mark.asyncio
    async def test_unreachable_channel_replies_diagnostic(self):
        async def probe(channel):
            return False

        before = record(channels=["jobs"])
        result = await transition(before, AddChannelCommand("@ghost"), probe)

        assert result.record == before
        assert result.messages[0]["text"] == (
            "❌ Couldn't access @ghost. Ensure:\n"
            "- You're a member\n"
            "- Channel exists\n"
            "- No typos"
        )
