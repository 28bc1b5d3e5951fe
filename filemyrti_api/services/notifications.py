"""
Background delivery of form-submission notifications.

Handlers call ``dispatch()`` and return immediately; a worker task started
with the application drains a bounded queue and hands every job to each
channel (email, WhatsApp). Channel failures are logged here and never reach
the HTTP response. Nothing is retried.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from filemyrti_api.core.config import Settings
from filemyrti_api.utils.email_service import send_form_submission_email
from filemyrti_api.utils.whatsapp_service import send_form_submission_notification

logger = logging.getLogger(__name__)

Channel = Callable[[str, Dict[str, Any]], Awaitable[Any]]
Job = Tuple[str, Dict[str, Any]]


async def email_channel(form_type: str, form_data: Dict[str, Any]) -> bool:
    # smtplib blocks
    return await run_in_threadpool(send_form_submission_email, form_type, form_data)


async def whatsapp_channel(form_type: str, form_data: Dict[str, Any]) -> bool:
    return await send_form_submission_notification(form_type, form_data)


class NotificationDispatcher:
    def __init__(self, channels: Dict[str, Channel], maxsize: int = 100, drain_timeout: float = 10.0):
        self.channels = channels
        self.queue: "asyncio.Queue[Job]" = asyncio.Queue(maxsize=maxsize)
        self.drain_timeout = drain_timeout
        self._worker: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotificationDispatcher":
        return cls(
            {"Email": email_channel, "WhatsApp": whatsapp_channel},
            maxsize=settings.notification_queue_size,
        )

    def dispatch(self, form_type: str, form_data: Dict[str, Any]) -> bool:
        """Queue a notification without waiting. Returns False if it was dropped."""
        try:
            self.queue.put_nowait((form_type, dict(form_data)))
        except asyncio.QueueFull:
            logger.warning(f"Notification queue full ({self.queue.maxsize}); dropping {form_type} notification")
            return False
        return True

    async def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run(), name="notification-dispatcher")
            logger.info(f"Notification dispatcher started with channels: {', '.join(self.channels)}")

    async def stop(self) -> None:
        """Give queued jobs a bounded chance to finish, then cancel the worker."""
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self.queue.join(), timeout=self.drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Notification queue not drained within {self.drain_timeout}s; {self.queue.qsize()} job(s) dropped")
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("Notification dispatcher stopped")

    async def deliver(self, form_type: str, form_data: Dict[str, Any]) -> None:
        for name, channel in self.channels.items():
            try:
                await channel(form_type, form_data)
            except Exception as e:
                logger.error(f"{name} notification error (non-critical) for {form_type}: {str(e)}")

    async def _run(self) -> None:
        while True:
            form_type, form_data = await self.queue.get()
            try:
                await self.deliver(form_type, form_data)
            finally:
                self.queue.task_done()
