"""
utils/validation_utils.py

Purpose: Input validation and parsing

- Bot command parsing (/command@BotName args)
- Channel handle normalization
"""

import re
from typing import Optional, Tuple


COMMAND_PATTERN = re.compile(r"^/([A-Za-z0-9_]+)(?:@([A-Za-z0-9_]+))?(?:\s+(.*))?$", re.DOTALL)


def parse_command(text: str, bot_username: Optional[str] = None) -> Optional[Tuple[str, str]]:
    """
    Splits a bot command into its name and the remaining argument text.
    
    "/addchannel @news" -> ("addchannel", "@news")
    "/start@JobBot" -> ("start", "")
    
    Args:
        text: Raw message text
        bot_username: When given, commands addressed to another bot
                      (/cmd@OtherBot) are not treated as commands
    
    Returns:
        (command, argument_text) with the command lower-cased, or None if
        the text is not a command
    """
    if not text:
        return None
    
    match = COMMAND_PATTERN.match(text.strip())
    if not match:
        return None
    
    command, mention, rest = match.groups()
    
    if mention and bot_username and mention.lower() != bot_username.lower():
        return None
    
    return command.lower(), (rest or "").strip()


def first_argument(argument_text: str) -> Optional[str]:
    """
    Returns the first whitespace-separated token, or None if there is none.
    """
    if not argument_text:
        return None
    
    parts = argument_text.split()
    return parts[0] if parts else None


def normalize_channel_handle(handle: Optional[str]) -> str:
    """
    Normalizes a channel handle for storage.
    
    Strips surrounding whitespace and a single leading '@'.
    
    Args:
        handle: Raw handle, e.g. " @news "
    
    Returns:
        Normalized handle ("news"), or "" when nothing usable remains
    """
    if not handle:
        return ""
    
    handle = handle.strip()
    if handle.startswith("@"):
        handle = handle[1:]
    
    return handle.strip()


def channel_chat_id(channel: str) -> str:
    """Bot API chat_id for a public channel handle."""
    return f"@{normalize_channel_handle(channel)}"
