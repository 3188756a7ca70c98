"""
jobbot/flow/result.py

Purpose: Output of a single dialogue transition
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List

from jobbot.models.user import UserRecord

# Reachability check for a normalized channel handle (True = bot can post there)
ChannelProbe = Callable[[str], Awaitable[bool]]


@dataclass
class TransitionResult:
    """
    The record to persist and the replies to send, in order.
    """
    record: UserRecord
    messages: List[Dict[str, Any]] = field(default_factory=list)