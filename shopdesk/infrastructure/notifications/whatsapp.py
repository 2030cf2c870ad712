"""
WhatsApp gateway notifier.

Submits a media message to an HTTP gateway with a single GET request.
Transport failures and timeouts are retried with exponential backoff.
"""

from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from shopdesk.config import get_logger
from shopdesk.config.settings import NotifySettings, get_settings
from shopdesk.core.exceptions import DispatchError
from shopdesk.core.interfaces.delivery import INotifier

logger = get_logger(__name__)


class WhatsAppNotifier(INotifier):
    """Sends invoice links through the WhatsApp HTTP gateway."""

    def __init__(
        self,
        settings: NotifySettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings().notify
        self._transport = transport

    def build_params(
        self,
        phone_number: str,
        message: str,
        media_url: str,
        filename: str,
    ) -> dict[str, str]:
        """Query parameters for one gateway request."""
        return {
            "number": f"{self._settings.country_code}{phone_number}",
            "type": "media",
            "message": message,
            "media_url": media_url,
            "filename": filename,
            "instance_id": self._settings.instance_id,
            "access_token": self._settings.access_token,
        }

    def _get_retry_decorator(self) -> Any:
        """Get tenacity retry decorator with current settings."""
        s = self._settings
        return retry(
            stop=stop_after_attempt(max(1, s.max_retries)),
            wait=wait_exponential(
                multiplier=s.retry_delay,
                min=s.retry_delay,
                max=s.retry_delay * (s.retry_multiplier**3),
            ),
            retry=retry_if_exception_type((httpx.TransportError, httpx.TimeoutException)),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        logger.warning(
            "notification_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self._settings.timeout,
            transport=self._transport,
        ) as client:
            return await client.get(self._settings.gateway_url, params=params)

    async def send(
        self,
        phone_number: str,
        message: str,
        media_url: str,
        filename: str,
    ) -> None:
        """
        Submit a media message to the gateway.

        Raises:
            DispatchError: If the gateway is disabled, unreachable, or
                answers with a non-2xx status.
        """
        if not self._settings.enabled:
            raise DispatchError("notification gateway is disabled", code="GATEWAY_DISABLED")

        params = self.build_params(phone_number, message, media_url, filename)
        try:
            response = await self._get_retry_decorator()(self._get)(params)
        except httpx.HTTPError as e:
            logger.error("notification_transport_failed", error=str(e))
            raise DispatchError(str(e) or e.__class__.__name__) from e

        if not response.is_success:
            logger.error(
                "notification_rejected",
                status=response.status_code,
                body=response.text[:200],
            )
            raise DispatchError(
                f"gateway responded with HTTP {response.status_code}",
                status=response.status_code,
            )

        logger.info("notification_sent", filename=filename)


_notifier: WhatsAppNotifier | None = None


def get_notifier() -> WhatsAppNotifier:
    """Get singleton notifier instance."""
    global _notifier
    if _notifier is None:
        _notifier = WhatsAppNotifier()
    return _notifier
