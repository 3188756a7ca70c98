"""
utils/telegram_utils.py

Purpose: Telegram reply builders

- Constructs text, keyboard and keyboard-removal payloads
- Converts payloads into Bot API sendMessage parameters
"""

from typing import List, Dict, Any, Optional


def create_text_message(text: str) -> Dict[str, Any]:
    """
    Creates a simple text message response.
    
    Args:
        text: Message text
    
    Returns:
        Message payload dict
    """
    return {
        "type": "text",
        "text": text
    }


def create_keyboard_message(
    text: str,
    rows: List[List[str]],
    one_time: bool = True,
    resize: bool = True
) -> Dict[str, Any]:
    """
    Creates a message with a reply keyboard of selectable options.
    
    Args:
        text: Body text
        rows: Keyboard layout, one list of button labels per row
        one_time: Hide the keyboard after the user taps a button
        resize: Let the client shrink the keyboard to fit
    
    Returns:
        Keyboard message payload
    
    Example:
        rows = [["Remote", "Full-time"], ["Done"]]
    """
    return {
        "type": "keyboard",
        "text": text,
        "keyboard": [list(row) for row in rows],
        "one_time": one_time,
        "resize": resize
    }


def create_remove_keyboard_message(text: str) -> Dict[str, Any]:
    """
    Creates a text message that also clears any reply keyboard shown earlier.
    """
    return {
        "type": "remove_keyboard",
        "text": text
    }


def to_reply_markup(message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Builds the Bot API reply_markup object for a message payload.
    
    Returns:
        ReplyKeyboardMarkup / ReplyKeyboardRemove dict, or None for plain text
    """
    msg_type = message.get("type")
    
    if msg_type == "keyboard":
        return {
            "keyboard": [
                [{"text": label} for label in row]
                for row in message.get("keyboard", [])
            ],
            "one_time_keyboard": message.get("one_time", True),
            "resize_keyboard": message.get("resize", True)
        }
    elif msg_type == "remove_keyboard":
        return {"remove_keyboard": True}
    
    return None


def to_send_message_params(chat_id: int, message: Dict[str, Any]) -> Dict[str, Any]:
    """
    Converts a message payload into sendMessage JSON parameters.
    """
    params: Dict[str, Any] = {
        "chat_id": chat_id,
        "text": message.get("text", "")
    }
    
    reply_markup = to_reply_markup(message)
    if reply_markup:
        params["reply_markup"] = reply_markup
    
    return params