"""
Failure notifiers.

Delivery is best effort: every notifier logs and swallows its own errors.
"""

import logging

import httpx

from core.config import NOTIFICATION_TITLE, PUSHOVER_URL, Settings
from core.errors import ConfigError
from services.email import send_alert_email

logger = logging.getLogger(__name__)


class LogNotifier:
    """Writes alerts to the log only."""

    async def notify(self, message: str) -> None:
        logger.error("ALERT: %s", message)

    async def aclose(self) -> None:
        pass


class PushoverNotifier:
    """Push notifications through the Pushover messages API."""

    def __init__(self, token: str, user: str, client: httpx.AsyncClient | None = None, timeout: float = 10.0):
        if not token or not user:
            raise ConfigError("PUSHOVER_TOKEN and PUSHOVER_USER are required for pushover alerts")
        self.token = token
        self.user = user
        self._client = client
        self.timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        """Return the HTTP client, creating one if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def notify(self, message: str) -> None:
        data = {
            "token": self.token,
            "user": self.user,
            "title": NOTIFICATION_TITLE,
            "message": message,
        }
        try:
            response = await self._get_client().post(PUSHOVER_URL, data=data)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Pushover delivery failed: %s", e)
            return
        logger.info("Sent Pushover alert")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class EmailNotifier:
    """Alert email sent from the organisation mailbox via MS Graph."""

    def __init__(self, from_email: str, to_email: str, graph=None):
        if not from_email or not to_email:
            raise ConfigError("FROM_EMAIL and ERROR_EMAIL are required for email alerts")
        self.from_email = from_email
        self.to_email = to_email
        self.graph = graph

    async def notify(self, message: str) -> None:
        try:
            await send_alert_email(message, self.from_email, self.to_email, graph=self.graph)
        except Exception as e:
            logger.warning("Failed to send alert email: %s", e)
            return
        logger.info("Sent alert email to %s", self.to_email)

    async def aclose(self) -> None:
        pass


def build_notifier(settings: Settings):
    """Create the notifier selected by NOTIFY_BACKEND."""
    if settings.notify_backend == "pushover":
        return PushoverNotifier(settings.pushover_token, settings.pushover_user)
    if settings.notify_backend == "email":
        return EmailNotifier(settings.from_email, settings.error_email)
    if settings.notify_backend == "log":
        return LogNotifier()
    raise ConfigError(f"Unknown NOTIFY_BACKEND '{settings.notify_backend}'")
