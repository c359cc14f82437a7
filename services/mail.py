import asyncio
import logging
import smtplib
from email.message import EmailMessage

import config
from exceptions import MailDeliveryException

logger = logging.getLogger(__name__)


def make_a_nice_email(text: str) -> str:
    """Wrap a short HTML message in the shop's mail layout."""
    return f"""
    <div class="email" style="
        border: 1px solid black;
        padding: 20px;
        font-family: sans-serif;
        line-height: 2;
        font-size: 20px;
    ">
        <h2>Hello There!</h2>
        <p>{text}</p>
        <p>Your shop team</p>
    </div>
    """


class MailService:
    """
    Hands messages to an SMTP server.

    smtplib is blocking, so sending runs in a worker thread. Delivery problems
    are raised as MailDeliveryException, never swallowed.
    """

    def __init__(self, host: str | None = None, port: int | None = None,
                 user: str | None = None, password: str | None = None, sender: str | None = None):
        self.host = host if host is not None else config.MAIL_HOST
        self.port = port or config.MAIL_PORT
        self.user = user if user is not None else config.MAIL_USER
        self.password = password if password is not None else config.MAIL_PASS
        self.sender = sender or config.MAIL_FROM

    def _send_blocking(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
            if self.port == 587:
                smtp.starttls()
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        if not self.host:
            raise MailDeliveryException(to, "no mail server configured")
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        try:
            await asyncio.to_thread(self._send_blocking, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Mail delivery failed: {e}")
            raise MailDeliveryException(to, str(e)) from e
        logger.info(f"Mail '{subject}' handed to {self.host}")

    async def send_reset_token(self, to: str, reset_token: str) -> None:
        link = f"{config.FRONTEND_URL}/reset?resetToken={reset_token}"
        await self.send(
            to=to,
            subject="Your password reset token",
            html=make_a_nice_email(f'Your password reset token is here \n\n <a href="{link}">Click here to reset</a>')
        )
