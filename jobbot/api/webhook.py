"""
jobbot/api/webhook.py

Purpose: Telegram webhook endpoint

- Receives updates pushed by Telegram
- Verifies the secret token header when one is configured
- Parses updates and hands them to the dispatcher
"""

import hmac
from fastapi import APIRouter, Header, Request
from typing import Optional

from jobbot.core.config import settings
from jobbot.core.exceptions import AuthenticationError, ServiceNotReadyError
from jobbot.core.logging import get_logger
from jobbot.schemas.telegram import TelegramUpdate, parse_update
from utils.constants import WEBHOOK_ROUTE

logger = get_logger(__name__)
router = APIRouter()


def verify_secret(received: Optional[str], expected: Optional[str]) -> None:
    """
    Raises AuthenticationError when a secret is configured and the header
    does not match it.
    """
    if not expected:
        return
    if not received or not hmac.compare_digest(received, expected):
        raise AuthenticationError("Invalid webhook secret token")


@router.post(WEBHOOK_ROUTE)
async def telegram_webhook(
    update: TelegramUpdate,
    request: Request,
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
):
    """
    Webhook endpoint for Telegram updates.
    
    Always answers {"ok": true} for accepted updates, even when the
    dialogue failed, so Telegram does not redeliver them.
    """
    verify_secret(x_telegram_bot_api_secret_token, settings.WEBHOOK_SECRET)
    
    inbound = parse_update(update, settings.BOT_USERNAME)
    if inbound is None:
        logger.debug(f"Ignoring update {update.update_id} without text message")
        return {"ok": True, "handled": False}
    
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise ServiceNotReadyError("Dispatcher is not initialized")
    result = await dispatcher.dispatch(inbound)
    
    return {"ok": True, "handled": True, "status": result.get("status")}

