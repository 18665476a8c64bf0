"""Alert sink client with exponential backoff retry logic"""

import httpx
import asyncio
import logging
from typing import Dict, Any
from welth_engine.config import settings
from welth_engine.domain.exceptions import AlertDeliveryError
from welth_engine.infrastructure.observability.metrics import alert_latency_histogram, alert_failure_counter

logger = logging.getLogger(__name__)


def build_alert(user_id: str, subject: str, action: str, reason: str, message: str) -> Dict[str, Any]:
    """Structured alert payload: subject plus a templated body"""
    return {
        "user_id": user_id,
        "subject": subject,
        "template": "guardian-alert",
        "body": {
            "action": action,
            "reason": reason,
            "message": message,
        },
    }


class AlertClient:
    """Client for the notification sink (email dispatch lives behind it)"""

    def __init__(self, webhook_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.webhook_url = webhook_url or settings.alert_webhook_url
        self.max_retries = settings.alert_max_retries
        self.backoff_base = settings.alert_backoff_base
        self.timeout = settings.http_timeout_seconds
        self.transport = transport

    async def send_alert(self, payload: Dict[str, Any]) -> None:
        """
        Deliver an alert to the notification sink with retry logic.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1)
        - Retries on 5xx/4xx responses and network failures
        - Tracks latency histogram and failure counter

        Raises:
            AlertDeliveryError: when every attempt failed
        """
        attempt = 0
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with alert_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    alert_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logger.error(
                            f"Alert delivery failed after {attempt} attempts: {e}",
                            extra={"user_id": payload.get("user_id"), "subject": payload.get("subject")},
                        )
                        raise AlertDeliveryError(f"Alert not delivered after {attempt} attempts") from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
