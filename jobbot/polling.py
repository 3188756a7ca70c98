"""
jobbot/polling.py

Purpose: Long-polling entry point

- Pulls updates with getUpdates instead of receiving webhooks
- Dispatches each update as its own task (per-user locks keep order)
- SIGINT/SIGTERM stop polling; in-flight events are allowed to finish

Run: python -m jobbot.polling
"""

import asyncio
import signal
from typing import Any, Dict, Optional, Set

from pydantic import ValidationError as PydanticValidationError

from jobbot.core.config import settings, validate_settings
from jobbot.core.exceptions import TransportError
from jobbot.core.logging import setup_logging, get_logger
from jobbot.db.factory import open_stores
from jobbot.flow.dispatcher import Dispatcher
from jobbot.schemas.telegram import TelegramUpdate, parse_update
from jobbot.services.telegram_service import TelegramService

logger = get_logger(__name__)


class PollingRunner:
    """
    Receives updates from Telegram and feeds them to the dispatcher.
    """
    
    def __init__(
        self,
        telegram: TelegramService,
        dispatcher: Dispatcher,
        poll_timeout: int = 30,
        bot_username: Optional[str] = None,
        retry_delay: float = 5.0
    ):
        self.telegram = telegram
        self.dispatcher = dispatcher
        self.poll_timeout = poll_timeout
        self.bot_username = bot_username
        self.retry_delay = retry_delay
        self.offset: Optional[int] = None
        self._stopping = asyncio.Event()
        self._tasks: Set[asyncio.Task] = set()
    
    def stop(self, reason: str = "requested"):
        if not self._stopping.is_set():
            logger.info(f"🛑 Stopping polling ({reason})")
            self._stopping.set()
    
    @property
    def in_flight(self) -> int:
        return len(self._tasks)
    
    async def run(self):
        """
        Polls until stop() is called, then waits for in-flight events.
        """
        logger.info("📡 Polling for updates...")
        
        try:
            while not self._stopping.is_set():
                updates = await self._poll_once()
                if updates is None:
                    continue
                for raw in updates:
                    self.handle_raw_update(raw)
        finally:
            await self.drain()
    
    async def _poll_once(self):
        """
        One getUpdates call, abandoned early if a stop is requested.
        
        Returns:
            List of raw updates, or None when nothing should be processed
        """
        poll = asyncio.create_task(self.telegram.get_updates(self.offset, self.poll_timeout))
        stop_wait = asyncio.create_task(self._stopping.wait())
        
        done, _ = await asyncio.wait({poll, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
        
        if poll not in done:
            poll.cancel()
            await asyncio.gather(poll, return_exceptions=True)
            return None
        
        stop_wait.cancel()
        await asyncio.gather(stop_wait, return_exceptions=True)
        
        try:
            return poll.result()
        except TransportError as e:
            logger.error(f"❌ getUpdates failed: {e.message}; retrying in {self.retry_delay}s")
            await self._sleep(self.retry_delay)
            return None
        except Exception as e:
            logger.error(
                f"❌ Unexpected getUpdates failure: {e}; retrying in {self.retry_delay}s",
                exc_info=True
            )
            await self._sleep(self.retry_delay)
            return None

    async def _sleep(self, seconds: float):
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
    
    def handle_raw_update(self, raw: Dict[str, Any]) -> Optional[asyncio.Task]:
        """
        Validates one raw update, advances the offset and schedules dispatch.
        """
        update_id = raw.get("update_id")
        if isinstance(update_id, int):
            self.offset = update_id + 1
        
        try:
            update = TelegramUpdate.model_validate(raw)
        except PydanticValidationError as e:
            logger.warning(f"Skipping malformed update {update_id}: {e}")
            return None
        
        inbound = parse_update(update, self.bot_username)
        if inbound is None:
            return None
        
        task = asyncio.create_task(self.dispatcher.dispatch(inbound))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
    
    async def drain(self):
        if self._tasks:
            logger.info(f"Waiting for {len(self._tasks)} in-flight event(s)")
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


async def main():
    setup_logging()
    validate_settings()
    
    record_store, job_store = await open_stores()
    telegram = TelegramService()
    
    try:
        me = await telegram.get_me()
        bot_username = settings.BOT_USERNAME or me.get("username")
        logger.info(f"🤖 Authorized as @{bot_username}")
        
        # getUpdates is rejected while a webhook is registered
        await telegram.delete_webhook()
        
        dispatcher = Dispatcher(record_store, telegram, bot_name=settings.BOT_NAME)
        runner = PollingRunner(
            telegram,
            dispatcher,
            poll_timeout=settings.POLLING_TIMEOUT,
            bot_username=bot_username
        )
        
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, runner.stop, sig.name)
            except NotImplementedError:
                # Windows event loops do not support signal handlers
                pass
        
        logger.info("🎉 Bot started successfully")
        await runner.run()
        
    finally:
        await telegram.close()
        await record_store.close()
        await job_store.close()
        logger.info("👋 Bot stopped")


if __name__ == "__main__":
    asyncio.run(main())
