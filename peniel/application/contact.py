from typing import Any, Dict, Optional

import structlog

from peniel.api.schemas import ContactRequest
from peniel.core.config import Settings, settings as default_settings
from peniel.core.observability import metrics, trace_async_operation
from peniel.core.security import HTMLSanitizer, html_sanitizer
from peniel.domain.exceptions import EmailConfigurationException, EmailDeliveryException
from peniel.infrastructure.email.resend_client import EmailSender

logger = structlog.get_logger(__name__)


class ContactService:
    """Forwards contact form messages to the ministry inbox."""

    def __init__(
        self,
        sender: Optional[EmailSender],
        config: Optional[Settings] = None,
        sanitizer: HTMLSanitizer = html_sanitizer,
    ) -> None:
        self.sender = sender
        self.config = config or default_settings
        self.sanitizer = sanitizer

    def render_html(self, message: ContactRequest) -> str:
        clean = self.sanitizer.sanitize
        return (
            f"<h2>New Message from {clean(self.config.ministry_name)} Website</h2>"
            f"<p><strong>Name:</strong> {clean(message.name)}</p>"
            f"<p><strong>Email:</strong> {clean(message.email)}</p>"
            "<hr>"
            "<h3>Message:</h3>"
            f"<p>{clean(message.message)}</p>"
        )

    async def send(self, message: ContactRequest) -> Dict[str, Any]:
        if self.sender is None or not self.config.email_configured():
            metrics.record_email("not_configured")
            raise EmailConfigurationException()

        async with trace_async_operation("send_contact_email"):
            try:
                result = await self.sender.send(
                    sender=f"Contact Form <{self.config.sender_email}>",
                    to=[self.config.contact_form_recipient_email],
                    subject=f"New Contact Form Message: {message.subject}",
                    html=self.render_html(message),
                    reply_to=message.email,
                )
            except EmailDeliveryException:
                metrics.record_email("error")
                raise

        metrics.record_email("sent")
        logger.info("Contact message forwarded", email_id=result.get("id"))
        return result
