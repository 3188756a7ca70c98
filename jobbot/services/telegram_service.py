"""
jobbot/services/telegram_service.py

Purpose: Telegram Bot API client

- Sends text and keyboard replies
- Probes channel reachability (sendChatAction)
- Long-polling and webhook registration
"""

import httpx
from typing import Dict, Any, List, Optional
from jobbot.core.config import settings
from jobbot.core.exceptions import TransportError
from jobbot.core.logging import get_logger
from utils.telegram_utils import to_send_message_params
from utils.validation_utils import channel_chat_id

logger = get_logger(__name__)


class TelegramService:
    """Service for talking to the Telegram Bot API"""
    
    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.token = token if token is not None else settings.BOT_TOKEN
        self.api_url = (api_url or settings.TELEGRAM_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.TELEGRAM_TIMEOUT
        self.base_url = f"{self.api_url}/bot{self.token}"
        self._client = client
    
    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client
    
    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None
    
    async def call(
        self,
        method: str,
        payload: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None
    ) -> Any:
        """
        Calls a Bot API method and returns its "result".
        
        Raises:
            TransportError: On network errors, timeouts, or {"ok": false} replies
        """
        url = f"{self.base_url}/{method}"
        
        try:
            response = await self.client.post(
                url,
                json=payload or {},
                timeout=timeout if timeout is not None else self.timeout
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Telegram API timeout calling {method}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Telegram API request failed calling {method}: {e}") from e
        
        try:
            body = response.json()
        except ValueError:
            body = {}
        
        if response.status_code != 200 or not body.get("ok"):
            description = body.get("description") or response.text
            raise TransportError(
                f"Telegram API error calling {method}: {response.status_code} - {description}",
                details={"method": method, "status_code": response.status_code}
            )
        
        return body.get("result")
    
    async def send_message(self, chat_id: int, message: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sends one reply payload to a chat.
        
        Args:
            chat_id: Target chat
            message: Payload built by utils.telegram_utils
            
        Returns:
            {
                "success": True/False,
                "message_id": 123,
                "error": "Optional error message"
            }
        """
        try:
            result = await self.call("sendMessage", to_send_message_params(chat_id, message))
            logger.debug(f"Message sent to {chat_id}: id={result.get('message_id')}")
            
            return {
                "success": True,
                "message_id": result.get("message_id")
            }
        except TransportError as e:
            logger.error(f"❌ Failed to send message to {chat_id}: {e.message}")
            return {
                "success": False,
                "error": e.message
            }
        except Exception as e:
            logger.error(f"Error sending message to {chat_id}: {e}", exc_info=True)
            return {
                "success": False,
                "error": str(e)
            }
    
    async def check_channel(self, channel: str) -> bool:
        """
        Checks that the bot can act in a channel by sending a "typing" action.
        
        Fails when the channel does not exist, the handle is mistyped, or the
        bot is not a member.
        
        Returns:
            True if reachable, False otherwise
        """
        try:
            await self.call("sendChatAction", {
                "chat_id": channel_chat_id(channel),
                "action": "typing"
            })
            return True
        except TransportError as e:
            logger.info(f"Channel probe failed for @{channel}: {e.message}")
            return False
    
    async def get_updates(self, offset: Optional[int] = None, timeout: int = 30) -> List[Dict[str, Any]]:
        """
        Long-polls for new updates. The HTTP timeout exceeds the poll timeout.
        """
        payload: Dict[str, Any] = {
            "timeout": timeout,
            "allowed_updates": ["message"]
        }
        if offset is not None:
            payload["offset"] = offset
        
        return await self.call("getUpdates", payload, timeout=timeout + self.timeout)
    
    async def set_webhook(self, url: str, secret_token: Optional[str] = None) -> bool:
        payload: Dict[str, Any] = {
            "url": url,
            "allowed_updates": ["message"]
        }
        if secret_token:
            payload["secret_token"] = secret_token
        
        return bool(await self.call("setWebhook", payload))
    
    async def delete_webhook(self) -> bool:
        return bool(await self.call("deleteWebhook", {"drop_pending_updates": False}))
    
    async def get_me(self) -> Dict[str, Any]:
        return await self.call("getMe")
    