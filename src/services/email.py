"""Email delivery for the password-reset flow."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)

APP_NAME = "Notes"


class EmailService:
    """Sends transactional email over SMTP.

    Delivery failures never interrupt the caller's flow: every send method
    returns False instead of raising.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        if not self.settings.smtp_configured:
            logger.info("SMTP not configured, emails will not be delivered")

    def send(self, to_email: str, subject: str, html_body: str) -> bool:
        """Send an HTML email. Returns True if the SMTP server accepted it."""
        if not self.settings.smtp_configured:
            logger.warning(f"Cannot send '{subject}' to {to_email}: SMTP not configured")
            return False

        msg = MIMEMultipart("alternative")
        msg["From"] = self.settings.email_from
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=10) as server:
                if self.settings.smtp_use_tls:
                    server.starttls()
                if self.settings.smtp_username and self.settings.smtp_password:
                    server.login(self.settings.smtp_username, self.settings.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {to_email}: {e}")
            return False

        logger.info(f"Sent '{subject}' to {to_email}")
        return True

    def send_password_reset_code(self, to_email: str, code: str, name: str | None = None) -> bool:
        ttl_minutes = self.settings.otp_ttl_minutes
        subject = f"[{APP_NAME}] Password reset code"
        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #333;">Password reset</h2>
            <p>Hello {escape(name or "there")},</p>
            <p>We received a request to reset your password. Enter this code to continue:</p>
            <div style="background-color: #f5f5f5; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px;">
                <h1 style="color: #667eea; margin: 0; letter-spacing: 5px; font-family: monospace;">{code}</h1>
            </div>
            <p style="color: #666; font-size: 14px;">
                This code is valid for {ttl_minutes} minutes. Do not share it with anyone.<br>
                If you did not request a password reset, you can ignore this email.
            </p>
        </div>
        """
        sent = self.send(to_email, subject, html_body)
        if not sent and self.settings.is_development:
            # Local development without SMTP: surface the code so the flow can be completed
            logger.warning(f"Password reset code for {to_email}: {code}")
        return sent

    def send_password_reset_success(self, to_email: str, name: str | None = None) -> bool:
        subject = f"[{APP_NAME}] Your password was reset"
        html_body = f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
            <h2 style="color: #333;">Password reset successful</h2>
            <p>Hello {escape(name or "there")},</p>
            <p>Your password has been reset. You can now log in with your new password.</p>
            <p style="color: #666; font-size: 14px;">
                If you did not make this change, contact support immediately.
            </p>
        </div>
        """
        return self.send(to_email, subject, html_body)
