"""
jobbot/flow/states.py

Purpose: Defines all onboarding conversation states

- Enum of each step in the dialogue, stored verbatim in user records
- Single source of truth for flow stages
- State transition validation
- Metadata for each state (progress step, description)
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from dataclasses import dataclass


class UserState(str, Enum):
    """
    Defines all possible states in the onboarding dialogue.
    Values are the strings persisted in the user document.
    """
    
    # No record yet, or the user never sent /start
    NEW = ""
    
    # Profile collection
    AWAITING_FIRST_NAME = "awaiting_first_name"
    AWAITING_LAST_NAME = "awaiting_last_name"
    
    # Job preferences
    AWAITING_PREFERENCES = "awaiting_preferences"
    
    # Onboarding finished, channels may be added
    READY = "ready"


@dataclass
class StateMetadata:
    """
    Metadata associated with each conversation state.
    """
    name: UserState
    display_name: str
    step_number: Optional[int] = None  # For progress tracking
    total_steps: int = 3  # Total steps in happy path
    requires_user_input: bool = True  # Whether state waits for user input
    description: str = ""  # Internal description


STATE_METADATA: Dict[UserState, StateMetadata] = {
    UserState.NEW: StateMetadata(
        name=UserState.NEW,
        display_name="Not started",
        requires_user_input=False,
        description="Plain text is ignored until /start"
    ),
    UserState.AWAITING_FIRST_NAME: StateMetadata(
        name=UserState.AWAITING_FIRST_NAME,
        display_name="First name",
        step_number=1,
        description="Collect first name"
    ),
    UserState.AWAITING_LAST_NAME: StateMetadata(
        name=UserState.AWAITING_LAST_NAME,
        display_name="Last name",
        step_number=2,
        description="Collect last name"
    ),
    UserState.AWAITING_PREFERENCES: StateMetadata(
        name=UserState.AWAITING_PREFERENCES,
        display_name="Job preferences",
        step_number=3,
        description="Collect preferences until the user sends Done"
    ),
    UserState.READY: StateMetadata(
        name=UserState.READY,
        display_name="Ready",
        requires_user_input=False,
        description="Onboarding complete; channels can be registered"
    ),
}


# /start may be issued from anywhere, so every state can reach AWAITING_FIRST_NAME
STATE_TRANSITIONS: Dict[UserState, List[UserState]] = {
    UserState.NEW: [
        UserState.NEW,
        UserState.AWAITING_FIRST_NAME,
    ],
    UserState.AWAITING_FIRST_NAME: [
        UserState.AWAITING_FIRST_NAME,
        UserState.AWAITING_LAST_NAME,
    ],
    UserState.AWAITING_LAST_NAME: [
        UserState.AWAITING_LAST_NAME,
        UserState.AWAITING_PREFERENCES,
        UserState.AWAITING_FIRST_NAME,
    ],
    UserState.AWAITING_PREFERENCES: [
        UserState.AWAITING_PREFERENCES,  # Another preference added
        UserState.READY,
        UserState.AWAITING_FIRST_NAME,
    ],
    UserState.READY: [
        UserState.READY,
        UserState.AWAITING_FIRST_NAME,
    ],
}


def is_valid_transition(from_state: UserState, to_state: UserState) -> bool:
    """
    Checks if a state transition is valid.
    
    Args:
        from_state: Current state
        to_state: Target state
    
    Returns:
        True if transition is allowed, False otherwise
    """
    allowed_transitions = STATE_TRANSITIONS.get(from_state, [])
    return to_state in allowed_transitions


def parse_state(value: Any) -> UserState:
    """
    Maps a stored state value onto the enum.
    Missing, empty and unrecognised values all mean the user has not started.
    """
    if isinstance(value, UserState):
        return value
    try:
        return UserState(value or "")
    except ValueError:
        return UserState.NEW


def get_state_metadata(state: UserState) -> StateMetadata:
    return STATE_METADATA.get(state, StateMetadata(
        name=state,
        display_name=state.value,
        description="Unknown state"
    ))


def get_progress_message(state: UserState) -> str:
    """
    Generates a progress message for the current state (e.g., "Step 2 of 3").
    """
    metadata = get_state_metadata(state)
    if metadata.step_number and metadata.step_number > 0:
        return f"📍 Step {metadata.step_number} of {metadata.total_steps}"
    return ""
