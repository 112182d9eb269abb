import logging
from typing import List, Protocol, Tuple
import httpx

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    async def notify(self, title: str, body: str) -> None: ...


class LogNotifier:
    """Writes alert notifications to the log and keeps a history."""

    def __init__(self):
        self.sent: List[Tuple[str, str]] = []

    async def notify(self, title: str, body: str) -> None:
        self.sent.append((title, body))
        logger.warning(f"{title}: {body}")


class WebhookNotifier:
    """Posts alert notifications to a JSON webhook."""

    def __init__(self, webhook_url: str, transport: httpx.AsyncBaseTransport = None):
        self.webhook_url = webhook_url
        self.transport = transport

    async def notify(self, title: str, body: str) -> None:
        if not self.webhook_url:
            return
        async with httpx.AsyncClient(timeout=10, transport=self.transport) as client:
            response = await client.post(self.webhook_url, json={"title": title, "text": body})
            response.raise_for_status()
