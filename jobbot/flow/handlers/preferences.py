"""
jobbot/flow/handlers/preferences.py

Handles: STEP 3 – Job preferences

- Appends each selection (duplicates are kept, in order)
- "Done" (exact match) completes onboarding and clears the keyboard
"""

from jobbot.flow.result import TransitionResult
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord
from utils.constants import (
    DONE_KEYWORD,
    PREFERENCE_ADDED_MESSAGE,
    SETUP_COMPLETE_MESSAGE
)
from utils.telegram_utils import create_text_message, create_remove_keyboard_message


def handle_preference(record: UserRecord, text: str) -> TransitionResult:
    """
    Handles one message while preferences are being collected.
    
    Args:
        record: Current user record (state AWAITING_PREFERENCES)
        text: Keyboard selection or free text
    
    Returns:
        TransitionResult with the updated record and acknowledgement
    """
    if text == DONE_KEYWORD:
        return TransitionResult(
            record=record.model_copy(update={"state": UserState.READY}),
            messages=[create_remove_keyboard_message(SETUP_COMPLETE_MESSAGE)]
        )
    
    return TransitionResult(
        record=record.model_copy(update={
            "preferences": [*record.preferences, text],
            "state": UserState.AWAITING_PREFERENCES
        }),
        messages=[create_text_message(PREFERENCE_ADDED_MESSAGE.format(preference=text))]
    )
