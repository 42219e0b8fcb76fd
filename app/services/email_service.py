"""Email service for sending delivery notifications."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(self):
        """Initialize email service with SMTP configuration."""
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.from_email = settings.email_from or settings.smtp_user

    def _validate_config(self) -> bool:
        """Validate email configuration."""
        if not all([self.smtp_host, self.smtp_user, self.smtp_password]):
            logger.warning("Email service not configured properly")
            return False
        return True

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: str | None = None,
    ) -> bool:
        """Send an email via SMTP.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            text_content: Plain text content (fallback)

        Returns:
            True if email sent successfully, False otherwise
        """
        if not self._validate_config():
            logger.error("Cannot send email - configuration invalid")
            return False

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = self.from_email
            msg["To"] = to_email

            if text_content:
                msg.attach(MIMEText(text_content, "plain"))
            msg.attach(MIMEText(html_content, "html"))

            logger.info("Sending email to %s with subject: %s", to_email, subject)

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            logger.info("Email sent successfully to %s", to_email)
            return True

        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed: %s", str(e))
            return False
        except smtplib.SMTPException as e:
            logger.error("SMTP error sending email: %s", str(e))
            return False
        except OSError as e:
            logger.error("Could not reach SMTP server: %s", str(e))
            return False

    def send_delivery_email(
        self,
        to_email: str,
        job_number: str,
        address: str,
        delivery_url: str,
        subject: str | None = None,
        message: str | None = None,
        business_name: str | None = None,
    ) -> bool:
        """Send the delivery link of a job to the customer."""
        sender = business_name or settings.app_name
        subject = subject or f"Your photos for {address} are ready"

        text_content = (
            f"Hello,\n\nThe media for {address} (job {job_number}) is ready.\n\n"
            + (f"{message}\n\n" if message else "")
            + f"View and download your files: {delivery_url}\n\n{sender}\n"
        )
        note_html = f"<p>{escape(message)}</p>" if message else ""
        html_content = self._wrap_html(
            sender,
            f"""
            <p>Hello,</p>
            <p>The media for <strong>{escape(address)}</strong> (job {escape(job_number)}) is ready.</p>
            {note_html}
            <p style="text-align: center; margin: 30px 0;">
                <a href="{escape(delivery_url)}"
                   style="background-color: #2563eb; color: white; text-decoration: none; padding: 12px 30px; border-radius: 8px;">
                    View your delivery
                </a>
            </p>
            """,
        )
        return self.send_email(to_email, subject, html_content, text_content)

    def send_revision_requested_email(
        self,
        to_email: str,
        job_number: str,
        address: str,
        order_number: str,
        file_count: int,
        comments: str,
        remaining_rounds: int,
    ) -> bool:
        """Tell the partner that the client asked for a revision."""
        subject = f"Revision requested for {address} ({order_number})"
        text_content = (
            f"The client requested a revision of {file_count} file(s) "
            f"in order {order_number} of job {job_number}.\n\n"
            f"Feedback:\n{comments}\n\n"
            f"Revision rounds remaining: {remaining_rounds}\n"
        )
        html_content = self._wrap_html(
            settings.app_name,
            f"""
            <p>The client requested a revision of <strong>{file_count}</strong> file(s)
               in order {escape(order_number)} of job {escape(job_number)}.</p>
            <blockquote style="border-left: 4px solid #f59e0b; padding-left: 12px; color: #374151;">
                {escape(comments)}
            </blockquote>
            <p>Revision rounds remaining: <strong>{remaining_rounds}</strong></p>
            """,
        )
        return self.send_email(to_email, subject, html_content, text_content)

    def _wrap_html(self, title: str, body: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head><meta charset="UTF-8"><title>{escape(title)}</title></head>
        <body style="margin: 0; padding: 0; font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f3f4f6;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <div style="background-color: white; border-radius: 12px; padding: 30px;">
                    <h1 style="margin-top: 0; font-size: 22px; color: #111827;">{escape(title)}</h1>
                    {body}
                </div>
            </div>
        </body>
        </html>
        """


# Create singleton instance
email_service = EmailService()
