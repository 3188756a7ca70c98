"""
jobbot/flow/handlers/welcome.py

Handles: /start

- Greets the user by their chat display name
- Asks for the first name
- Restarts onboarding from any state, keeping earlier answers on record
"""

from jobbot.flow.events import StartCommand
from jobbot.flow.result import TransitionResult
from jobbot.flow.states import UserState
from jobbot.models.user import UserRecord
from utils.constants import (
    WELCOME_MESSAGE,
    ASK_FIRST_NAME_MESSAGE,
    DEFAULT_DISPLAY_NAME
)
from utils.telegram_utils import create_text_message


def handle_start(record: UserRecord, event: StartCommand, bot_name: str) -> TransitionResult:
    """
    Sends the welcome and first-name prompt and moves to AWAITING_FIRST_NAME.
    
    Only the state changes; names, preferences and channels stay as stored
    until new answers overwrite them.
    """
    welcome = WELCOME_MESSAGE.format(
        bot_name=bot_name,
        name=event.display_name or DEFAULT_DISPLAY_NAME
    )
    
    return TransitionResult(
        record=record.model_copy(update={"state": UserState.AWAITING_FIRST_NAME}),
        messages=[
            create_text_message(welcome),
            create_text_message(ASK_FIRST_NAME_MESSAGE),
        ]
    )
