"""
Email Service

Sends password reset and email verification messages over SMTP.
"""

import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from src.linkbio.core.config import settings, logger


class EmailSender:
    """
    Thin SMTP client configured from settings.

    Every send method returns True when the message was handed to the SMTP
    server and False otherwise; failures are logged, not raised.
    """

    def __init__(
        self,
        smtp_server: str,
        smtp_port: int,
        sender_email: Optional[str],
        sender_password: Optional[str],
        frontend_url: str,
    ):
        self.smtp_server = smtp_server
        self.smtp_port = smtp_port
        self.sender_email = sender_email
        self.sender_password = sender_password
        self.frontend_url = frontend_url.rstrip("/")

    def send_reset_password_email(self, email: str, token: str) -> bool:
        reset_url = f"{self.frontend_url}/reset-password/{token}"
        body = f"""Hello!

We received a request to reset the password for your account.

Follow this link to choose a new password (valid for one hour):
{reset_url}

If you did not request a reset, you can ignore this email.
"""
        return self._send(email, "Reset your password", body)

    def send_verification_email(self, email: str, token: str) -> bool:
        verify_url = f"{self.frontend_url}/verify/{token}"
        body = f"""Welcome!

Please confirm your email address by following this link:
{verify_url}
"""
        return self._send(email, "Verify your email", body)

    def _send(self, recipient: str, subject: str, body: str) -> bool:
        if not self.sender_email or not self.sender_password:
            logger.error(
                "Email credentials not configured. Set SENDER_EMAIL and SENDER_PASSWORD environment variables."
            )
            return False

        message = MIMEMultipart()
        message["From"] = self.sender_email
        message["To"] = recipient
        message["Subject"] = subject
        message.attach(MIMEText(body, "plain"))

        try:
            with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
                server.starttls()
                server.login(self.sender_email, self.sender_password)
                server.send_message(message)
            logger.info(f"Email '{subject}' sent to {recipient}")
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email '{subject}' to {recipient}: {e}")
            return False


def get_email_sender() -> EmailSender:
    return EmailSender(
        smtp_server=settings.SMTP_SERVER,
        smtp_port=settings.SMTP_PORT,
        sender_email=settings.SENDER_EMAIL,
        sender_password=settings.SENDER_PASSWORD,
        frontend_url=settings.FRONTEND_URL,
    )
