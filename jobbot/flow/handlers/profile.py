"""
jobbot/flow/handlers/profile.py

Handles: STEP 1-2 – First and last name

- Stores the answer verbatim
- Prompts for the next field
- Shows the preference keyboard once the last name is known
"""

from jobbot.flow.result import TransitionResult
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord
from utils.constants import (
    ASK_LAST_NAME_MESSAGE,
    ASK_PREFERENCES_MESSAGE,
    PREFERENCE_KEYBOARD
)
from utils.telegram_utils import create_text_message, create_keyboard_message


def handle_first_name(record: UserRecord, text: str) -> TransitionResult:
    return TransitionResult(
        record=record.model_copy(update={
            "first_name": text,
            "state": UserState.AWAITING_LAST_NAME
        }),
        messages=[create_text_message(ASK_LAST_NAME_MESSAGE.format(first_name=text))]
    )


def handle_last_name(record: UserRecord, text: str) -> TransitionResult:
    """
    Records the last name and opens preference collection with a
    one-time keyboard of common options.
    """
    reply = ASK_PREFERENCES_MESSAGE.format(
        first_name=record.first_name,
        last_name=text
    )
    
    return TransitionResult(
        record=record.model_copy(update={
            "last_name": text,
            "state": UserState.AWAITING_PREFERENCES
        }),
        messages=[create_keyboard_message(reply, PREFERENCE_KEYBOARD, one_time=True)]
    )
