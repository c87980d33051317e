"""SMTP delivery of finished summaries."""

from __future__ import annotations

import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import List, Optional, Sequence

from anyio import to_thread

from notes_summarizer.config import Settings
from notes_summarizer.errors import MailerError

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333; border-bottom: 2px solid #007bff; padding-bottom: 10px;">
    Meeting Summary
  </h2>
  <div style="white-space: pre-wrap; line-height: 1.6; color: #555; background-color: #f9f9f9; padding: 20px; border-radius: 5px; margin: 20px 0;">
    {body}
  </div>
  <p style="color: #888; font-size: 12px; margin-top: 30px;">
    This summary was generated and sent via AI Meeting Notes Summarizer
  </p>
</div>
"""


def render_html(body: str) -> str:
    escaped = html.escape(body).replace("\n", "<br>")
    return HTML_TEMPLATE.format(body=escaped)


def compose_summary_message(
    *,
    from_email: str,
    recipients: Sequence[str],
    subject: str,
    body: str,
) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = ", ".join(recipients)
    msg["Subject"] = subject
    msg.set_content(body)
    msg.add_alternative(render_html(body), subtype="html")
    return msg


@dataclass
class SummaryMailer:
    """
    Sends summaries through an authenticated SMTP-over-SSL server.

    Built once at startup from settings and shared by every request.
    """

    user: str
    password: str
    host: str = "smtp.gmail.com"
    port: int = 465
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["SummaryMailer"]:
        if not (settings.email_user and settings.email_app_password):
            logger.info("Email configuration skipped - credentials not found")
            return None
        return cls(
            user=settings.email_user,
            password=settings.email_app_password,
            host=settings.smtp_host,
            port=settings.smtp_port,
        )

    def _connect(self) -> smtplib.SMTP_SSL:
        client = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        try:
            client.login(self.user, self.password)
        except BaseException:
            client.close()
            raise
        return client

    def verify_blocking(self) -> bool:
        try:
            with self._connect():
                pass
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning(f"Email configuration error: {exc}")
            logger.warning("Email features will not work until this is fixed")
            return False
        logger.info("Email server is ready to send messages")
        return True

    def send_blocking(self, msg: EmailMessage) -> None:
        try:
            with self._connect() as client:
                client.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailerError(str(exc)) from exc

    async def verify(self) -> bool:
        return await to_thread.run_sync(self.verify_blocking)

    async def send_summary(
        self, recipients: List[str], subject: str, body: str
    ) -> None:
        msg = compose_summary_message(
            from_email=self.user, recipients=recipients, subject=subject, body=body
        )
        logger.info(f"Sending email to: {recipients}")
        await to_thread.run_sync(self.send_blocking, msg)
