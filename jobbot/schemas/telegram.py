"""
jobbot/schemas/telegram.py

Purpose: Telegram update schemas and parser

- Validates incoming updates (webhook body or getUpdates result)
- Normalizes messages into InboundEvent
- Recognizes /start and /addchannel; everything else is plain text
"""

from pydantic import BaseModel, Field
from typing import Optional

from jobbot.flow.events import AddChannelCommand, InboundEvent, StartCommand, TextMessage
from utils.constants import COMMAND_ADD_CHANNEL, COMMAND_START
from utils.validation_utils import first_argument, parse_command


class TelegramUser(BaseModel):
    id: int
    is_bot: bool = False
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    
    class Config:
        extra = "ignore"


class TelegramChat(BaseModel):
    id: int
    type: str = "private"
    
    class Config:
        extra = "ignore"


class TelegramMessage(BaseModel):
    message_id: int
    chat: TelegramChat
    from_user: Optional[TelegramUser] = Field(default=None, alias="from")
    date: Optional[int] = None
    text: Optional[str] = None
    
    class Config:
        extra = "ignore"
        populate_by_name = True


class TelegramUpdate(BaseModel):
    """
    Subset of the Bot API Update object the bot reacts to.
    """
    update_id: int
    message: Optional[TelegramMessage] = None
    
    class Config:
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "update_id": 10000,
                "message": {
                    "message_id": 1,
                    "from": {"id": 42, "is_bot": False, "first_name": "Ann"},
                    "chat": {"id": 42, "type": "private"},
                    "date": 1700000000,
                    "text": "/start"
                }
            }
        }


def parse_update(update: TelegramUpdate, bot_username: Optional[str] = None) -> Optional[InboundEvent]:
    """
    Converts a Telegram update into an InboundEvent.
    
    Returns:
        InboundEvent, or None for updates the dialogue does not handle
        (no message, no text, no sender, or sent by a bot)
    """
    message = update.message
    if message is None or message.text is None or message.from_user is None:
        return None
    
    if message.from_user.is_bot:
        return None
    
    command = parse_command(message.text, bot_username)
    
    if command and command[0] == COMMAND_START:
        event = StartCommand(display_name=message.from_user.first_name)
    elif command and command[0] == COMMAND_ADD_CHANNEL:
        event = AddChannelCommand(argument=first_argument(command[1]))
    else:
        event = TextMessage(text=message.text)
    
    return InboundEvent(
        user_id=str(message.from_user.id),
        chat_id=message.chat.id,
        event=event,
        update_id=update.update_id
    )
