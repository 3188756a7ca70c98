"""
jobbot/flow/dispatcher.py

Purpose: Central event dispatcher

- Receives normalized events from the webhook or the polling loop
- Loads the user record, runs the state machine, persists the result
- Sends replies in order through the transport
- Serializes events per user; never lets one bad event escape
"""

from typing import Any, Dict, Optional, Protocol

from jobbot.core.config import settings
from jobbot.core.logging import get_logger, LogContext
from jobbot.db.base import RecordStore
from jobbot.flow.events import InboundEvent
from jobbot.flow.machine import transition
from jobbot.flow.states import get_state_metadata, get_progress_message
from jobbot.services.session_service import UserLockRegistry
from utils.constants import GENERIC_ERROR_MESSAGE
from utils.telegram_utils import create_text_message

logger = get_logger(__name__)


class Transport(Protocol):
    """What the dispatcher needs from the chat platform client."""
    
    async def send_message(self, chat_id: int, message: Dict[str, Any]) -> Dict[str, Any]:
        ...
    
    async def check_channel(self, channel: str) -> bool:
        ...


class Dispatcher:
    """
    Bridges inbound events to the state machine and applies its output.
    """
    
    def __init__(
        self,
        store: RecordStore,
        transport: Transport,
        locks: Optional[UserLockRegistry] = None,
        bot_name: Optional[str] = None
    ):
        self.store = store
        self.transport = transport
        self.locks = locks or UserLockRegistry()
        self.bot_name = bot_name or settings.BOT_NAME
    
    async def dispatch(self, inbound: InboundEvent) -> Dict[str, Any]:
        """
        Handles one inbound event end to end.
        
        Args:
            inbound: Normalized event with user and chat ids
            
        Returns:
            Status dict ({"status": "success" | "error", ...})
        """
        with LogContext(user_id=inbound.user_id, event=inbound.event_type):
            logger.info(f"📨 Dispatching {inbound.event_type} from {inbound.user_id}")
            
            async with self.locks.lock(inbound.user_id):
                try:
                    record = await self.store.get(inbound.user_id)
                    result = await transition(
                        record,
                        inbound.event,
                        self.transport.check_channel,
                        bot_name=self.bot_name
                    )
                    
                    if result.record != record:
                        await self.store.put(inbound.user_id, result.record)
                    
                    if result.record.state != record.state:
                        metadata = get_state_metadata(result.record.state)
                        logger.info(
                            f"🔄 State: {record.state.value or 'new'} -> {result.record.state.value} "
                            f"({metadata.display_name}) {get_progress_message(result.record.state)}".rstrip()
                        )
                    
                except Exception as e:
                    logger.error(f"❌ Error for {inbound.event_type}: {e}", exc_info=True)
                    await self.send_replies(inbound.chat_id, [create_text_message(GENERIC_ERROR_MESSAGE)])
                    return {"status": "error", "error": str(e)}
                
                sent = await self.send_replies(inbound.chat_id, result.messages)
            
            return {
                "status": "success",
                "state": result.record.state.value,
                "replies": len(result.messages),
                "delivered": sent
            }
    
    async def send_replies(self, chat_id: int, messages) -> int:
        """
        Sends replies in order. Delivery failures are logged and skipped.
        
        Returns:
            Number of replies delivered
        """
        delivered = 0
        for message in messages:
            try:
                response = await self.transport.send_message(chat_id, message)
            except Exception as e:
                logger.error(f"❌ Failed to send reply to {chat_id}: {e}", exc_info=True)
                continue
            
            if response.get("success"):
                delivered += 1
            else:
                logger.error(f"❌ Failed to send reply to {chat_id}: {response.get('error')}")
        
        return delivered
