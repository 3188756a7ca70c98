"""
jobbot/flow/handlers/channels.py

Handles: /addchannel – Channel registration (any state)

- Validates the argument and normalizes the handle
- Probes the channel through the transport
- Adds it once; repeats are acknowledged without mutation
"""

from jobbot.core.logging import get_logger
from jobbot.flow.events import AddChannelCommand
from jobbot.flow.result import ChannelProbe, TransitionResult
from jobbot.models.user import UserRecord
from utils.constants import (
    ADD_CHANNEL_USAGE_MESSAGE,
    CHANNEL_ADDED_MESSAGE,
    CHANNEL_ALREADY_ADDED_MESSAGE,
    CHANNEL_UNREACHABLE_MESSAGE
)
from utils.telegram_utils import create_text_message
from utils.validation_utils import normalize_channel_handle

logger = get_logger(__name__)


async def handle_add_channel(
    record: UserRecord,
    event: AddChannelCommand,
    probe: ChannelProbe
) -> TransitionResult:
    """
    Registers a channel for the user.
    
    Args:
        record: Current user record
        event: Command with the raw argument (may be None)
        probe: Reachability check against the chat platform
    
    Returns:
        TransitionResult; the record is unchanged unless a new channel was added
    """
    channel = normalize_channel_handle(event.argument)
    
    if not channel:
        return TransitionResult(
            record=record,
            messages=[create_text_message(ADD_CHANNEL_USAGE_MESSAGE)]
        )
    
    reachable = await probe(channel)
    
    if not reachable:
        logger.info(f"Channel @{channel} is not reachable")
        return TransitionResult(
            record=record,
            messages=[create_text_message(CHANNEL_UNREACHABLE_MESSAGE.format(channel=channel))]
        )
    
    if record.has_channel(channel):
        return TransitionResult(
            record=record,
            messages=[create_text_message(CHANNEL_ALREADY_ADDED_MESSAGE.format(channel=channel))]
        )
    
    logger.info(f"Channel @{channel} added")
    return TransitionResult(
        record=record.model_copy(update={"channels": [*record.channels, channel]}),
        messages=[create_text_message(CHANNEL_ADDED_MESSAGE.format(channel=channel))]
    )
