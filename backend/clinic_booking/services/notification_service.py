"""
Webhook notification service.

Posts booking events to an external URL. Delivery is best effort: failures
are logged and reported through the return value, never raised, so a
successful booking is never rolled back because a receiver is down.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional
from urllib.parse import urlparse

import requests

from clinic_booking.domain.interfaces import INotifier

logger = logging.getLogger(__name__)


class WebhookNotifier(INotifier):
    """POST ``{event, data, timestamp}`` with exponential-backoff retries."""

    def __init__(
        self,
        url: Optional[str],
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.url = url
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sleep = sleep

    @property
    def enabled(self) -> bool:
        if not self.url:
            return False
        return urlparse(self.url).scheme in ("http", "https")

    def notify(self, event: str, data: dict) -> bool:
        if not self.enabled:
            logger.debug(
                "Webhook disabled, skipping notification",
                extra={"context": {"event": event}},
            )
            return False

        payload = {
            "event": event,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self.session.post(
                    self.url,
                    json=payload,
                    headers={
                        "Content-Type": "application/json",
                        "X-Webhook-Event": event,
                        "X-Attempt-Number": str(attempt),
                    },
                    timeout=self.timeout,
                )
                response.raise_for_status()
                logger.info(
                    "Webhook delivered",
                    extra={
                        "context": {
                            "event": event,
                            "attempt": attempt,
                            "status_code": response.status_code,
                        }
                    },
                )
                return True
            except requests.RequestException as e:
                logger.warning(
                    f"Webhook attempt {attempt}/{self.max_retries} failed",
                    extra={"context": {"event": event, "error": str(e)}},
                )
                if attempt < self.max_retries:
                    self.sleep(self.retry_delay * (2 ** (attempt - 1)))

        logger.error(
            "Webhook delivery failed after all retries",
            extra={"context": {"event": event, "attempts": self.max_retries}},
        )
        return False
