"""
jobbot/flow/machine.py

Purpose: Session state machine

- Single entry point: transition(record, event) -> (record, replies)
- Routes text to the handler for the current state
- Commands (/start, /addchannel) bypass state routing
- Verifies every produced transition against the state table
"""

from typing import Callable, Dict

from jobbot.core.exceptions import InvalidTransitionError
from jobbot.flow.events import AddChannelCommand, DialogueEvent, StartCommand, TextMessage
from jobbot.flow.handlers.channels import handle_add_channel
from jobbot.flow.handlers.preferences import handle_preference
from jobbot.flow.handlers.profile import handle_first_name, handle_last_name
from jobbot.flow.handlers.welcome import handle_start
from jobbot.flow.result import ChannelProbe, TransitionResult
from jobbot.flow.states import UserState, is_valid_transition
from jobbot.models.user import UserRecord

# States that consume free text; anything else ignores it silently
TEXT_HANDLERS: Dict[UserState, Callable[[UserRecord, str], TransitionResult]] = {
    UserState.AWAITING_FIRST_NAME: handle_first_name,
    UserState.AWAITING_LAST_NAME: handle_last_name,
    UserState.AWAITING_PREFERENCES: handle_preference,
}


async def transition(
    record: UserRecord,
    event: DialogueEvent,
    probe: ChannelProbe,
    bot_name: str = "JobBot"
) -> TransitionResult:
    """
    Computes the next record and the replies for one inbound event.
    
    The input record is never mutated. The only side effect is the channel
    probe issued for /addchannel.
    
    Args:
        record: Current user record (defaults for unknown users)
        event: StartCommand, TextMessage or AddChannelCommand
        probe: Channel reachability check
        bot_name: Name used in the welcome message
    
    Returns:
        TransitionResult with the record to persist and replies in send order
    
    Raises:
        InvalidTransitionError: If a handler produced an inconsistent record
        TypeError: For unknown event types
    """
    if isinstance(event, StartCommand):
        result = handle_start(record, event, bot_name)
    elif isinstance(event, AddChannelCommand):
        result = await handle_add_channel(record, event, probe)
    elif isinstance(event, TextMessage):
        handler = TEXT_HANDLERS.get(record.state)
        if handler is None:
            result = TransitionResult(record=record, messages=[])
        else:
            result = handler(record, event.text)
    else:
        raise TypeError(f"Unsupported event type: {type(event).__name__}")
    
    check_transition(record, result.record)
    return result


def check_transition(before: UserRecord, after: UserRecord) -> None:
    """
    Ensures the move is in the state table and the new state has the
    profile data it depends on.
    """
    if not is_valid_transition(before.state, after.state):
        raise InvalidTransitionError(
            f"Invalid state transition: {before.state.value!r} -> {after.state.value!r}"
        )
    
    if after.state != before.state:
        if after.state == UserState.AWAITING_LAST_NAME and after.first_name is None:
            raise InvalidTransitionError("Cannot ask for last name before first name is set")
        if after.state == UserState.READY and after.last_name is None:
            raise InvalidTransitionError("Cannot complete onboarding before last name is set")
