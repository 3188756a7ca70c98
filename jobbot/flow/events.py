"""
jobbot/flow/events.py

Purpose: Inbound dialogue events

- Transport-neutral representation of what the user sent
- StartCommand / TextMessage / AddChannelCommand
- InboundEvent envelope with the user and chat identifiers
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class StartCommand:
    """/start: restarts onboarding from the first-name prompt."""
    display_name: Optional[str] = None


@dataclass(frozen=True)
class TextMessage:
    """Free-form text, interpreted according to the current state."""
    text: str


@dataclass(frozen=True)
class AddChannelCommand:
    """/addchannel <handle>; argument is None when the user gave none."""
    argument: Optional[str] = None


DialogueEvent = Union[StartCommand, TextMessage, AddChannelCommand]


@dataclass(frozen=True)
class InboundEvent:
    """
    A dialogue event together with who sent it and where replies go.
    """
    user_id: str
    chat_id: int
    event: DialogueEvent
    update_id: Optional[int] = None
    
    @property
    def event_type(self) -> str:
        return type(self.event).__name__
