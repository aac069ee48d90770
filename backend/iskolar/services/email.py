"""
Email service for sending password reset codes via SMTP.

Uses the SMTP settings from iskolar.core.config.settings.
When SMTP is not configured the message is skipped with a warning, so local
development works without a mail server. Delivery failures are raised, not
retried: the caller decides whether to ask again.
"""

import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart

from iskolar.core.config import settings
from iskolar.core.errors import NotificationError

logger = logging.getLogger(__name__)


class EmailNotifier:
    def __init__(
        self,
        server: str = "",
        port: int = 587,
        username: str = "",
        password: str = "",
        sender: str = "",
        app_name: str = "iSkolar",
    ):
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.app_name = app_name

    @property
    def configured(self) -> bool:
        return bool(self.server and self.username)

    def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send a multipart (text + HTML) email.

        Returns False when SMTP is not configured, True once the server accepted
        the message. Raises NotificationError when delivery fails.
        """
        if not self.configured:
            logger.warning("SMTP not configured, skipping email to %s", to_email)
            return False

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.app_name} <{self.sender}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(self.server, self.port) as server:
                server.ehlo()
                server.starttls()
                server.ehlo()
                server.login(self.username, self.password)
                server.sendmail(self.sender, to_email, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            raise NotificationError() from e

        logger.info("Email sent to %s", to_email)
        return True


def send_otp_email(notifier: EmailNotifier, to_email: str, code: str, ttl_minutes: int = 5) -> bool:
    """Send the password reset code. The code only ever leaves through this message."""
    subject = f"Your {notifier.app_name} password reset code"

    html_body = f"""
    <div style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; max-width: 560px; margin: 0 auto; padding: 32px 24px; background: #ffffff; color: #1f2937;">
        <div style="text-align: center; margin-bottom: 32px;">
            <h1 style="color: #3A52A6; font-size: 28px; margin: 0;">{notifier.app_name}</h1>
        </div>

        <div style="background: #F3F4F6; border-radius: 12px; padding: 24px; margin-bottom: 24px;">
            <h2 style="color: #111827; font-size: 18px; margin: 0 0 16px 0;">Password Reset Code</h2>
            <p style="font-size: 14px; line-height: 1.6; margin: 0 0 20px 0;">
                Use the code below to reset your password. It is valid for <strong>{ttl_minutes} minutes</strong>.
            </p>
            <div style="text-align: center; font-size: 32px; font-weight: 700; letter-spacing: 8px; color: #3A52A6; font-family: monospace;">
                {code}
            </div>
        </div>

        <p style="color: #6B7280; font-size: 12px; text-align: center; margin: 0;">
            If you didn't request a password reset, you can safely ignore this email.
        </p>
    </div>
    """

    text_body = f"""
Your {notifier.app_name} password reset code is {code}

It is valid for {ttl_minutes} minutes.

If you didn't request a password reset, you can safely ignore this email.
    """.strip()

    return notifier.send(to_email, subject, html_body, text_body)


def get_notifier() -> EmailNotifier:
    return EmailNotifier(
        server=settings.SMTP_SERVER,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD,
        sender=settings.SMTP_FROM,
        app_name=settings.APP_NAME,
    )
