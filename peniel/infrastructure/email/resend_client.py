from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
import structlog

from peniel.domain.exceptions import EmailDeliveryException

logger = structlog.get_logger(__name__)


class EmailSender(ABC):
    @abstractmethod
    async def send(
        self,
        sender: str,
        to: List[str],
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        pass


class ResendEmailSender(EmailSender):
    """Sends mail through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self.transport = transport

    async def send(
        self,
        sender: str,
        to: List[str],
        subject: str,
        html: str,
        reply_to: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": sender,
            "to": to,
            "subject": subject,
            "html": html,
        }
        if reply_to:
            payload["reply_to"] = reply_to

        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Email provider unreachable", error=str(e))
            raise EmailDeliveryException(str(e)) from e

        if response.status_code >= 400:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            logger.error(
                "Email provider rejected message",
                status_code=response.status_code,
                error=message,
            )
            raise EmailDeliveryException(message)

        return response.json()
