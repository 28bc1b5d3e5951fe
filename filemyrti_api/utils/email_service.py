import smtplib
from datetime import datetime
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
import html
import logging
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from filemyrti_api.core.config import get_settings

logger = logging.getLogger(__name__)

IST = ZoneInfo("Asia/Kolkata")


def _strip_quotes(value: str) -> str:
    # .env files often carry quoted credentials
    return str(value).strip().strip("\"'")


def format_label(key: str) -> str:
    """'payment_id' -> 'Payment Id'; keys that are already labels pass through."""
    return " ".join(word[:1].upper() + word[1:] for word in key.replace("_", " ").split(" "))


def submission_time() -> str:
    return datetime.now(IST).strftime("%d/%m/%Y, %I:%M:%S %p")


def format_form_data(form_data: Dict[str, Any], form_type: str) -> str:
    """Render submitted fields as an HTML table. Empty values are left out."""
    rows = []
    for key, value in form_data.items():
        if value is None or value == "":
            continue
        rows.append(
            '<tr style="border-bottom: 1px solid #ddd;">\n'
            f'  <td style="padding: 8px; font-weight: bold; width: 30%;">{html.escape(format_label(key))}:</td>\n'
            f'  <td style="padding: 8px;">{html.escape(str(value)).replace(chr(10), "<br>")}</td>\n'
            "</tr>\n"
        )

    return (
        f"<h2>New {html.escape(form_type)} Submission</h2>\n\n"
        '<table style="border-collapse: collapse; width: 100%; max-width: 600px;">\n'
        f"{''.join(rows)}"
        "</table>\n"
        f'\n<p style="margin-top: 20px; color: #666; font-size: 12px;">Submitted at: {submission_time()}</p>'
    )


def send_email(to_email: str, subject: str, html_content: str, text_content: Optional[str] = None) -> bool:
    """
    Send an email using SMTP

    Args:
        to_email: Recipient email address
        subject: Email subject
        html_content: HTML content of the email
        text_content: Plain text content (optional, defaults to stripped HTML)

    Returns:
        True if email sent successfully, False if SMTP is not configured

    Raises:
        smtplib.SMTPException / OSError when the SMTP conversation fails
    """
    settings = get_settings()
    if not settings.smtp_host or not settings.smtp_user or not settings.smtp_password:
        logger.warning(f"SMTP credentials not configured. Email to {to_email} not sent. Please configure SMTP_HOST, SMTP_USER and SMTP_PASSWORD environment variables.")
        return False

    smtp_user = _strip_quotes(settings.smtp_user)
    smtp_password = _strip_quotes(settings.smtp_password)

    # Create message
    message = MIMEMultipart("alternative")
    message["Subject"] = subject
    message["From"] = f'"FileMyRTI Forms" <{smtp_user}>'
    message["To"] = to_email

    # Create plain text version if not provided
    if not text_content:
        text_content = html_content.replace("<br>", "\n").replace("</p>", "\n")

    # Attach both plain text and HTML versions
    message.attach(MIMEText(text_content, "plain"))
    message.attach(MIMEText(html_content, "html"))

    # Port 465 is implicit TLS; everything else upgrades with STARTTLS
    if settings.smtp_port == 465:
        with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout_seconds) as server:
            server.login(smtp_user, smtp_password)
            server.send_message(message)
    else:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout_seconds) as server:
            server.starttls()
            server.login(smtp_user, smtp_password)
            server.send_message(message)

    logger.info(f"Email sent successfully to {to_email}")
    return True


def send_form_submission_email(form_type: str, form_data: Dict[str, Any]) -> bool:
    """
    Email the admin inbox about a new form submission.

    Args:
        form_type: Type of form (e.g. 'Consultation', 'Callback Request', 'RTI Application')
        form_data: Label -> value pairs to include in the email

    Returns:
        True if the email was sent, False if email is not configured
    """
    settings = get_settings()
    subject = f"New Form Submission - {form_type}"
    sent = send_email(settings.admin_email, subject, format_form_data(form_data, form_type))
    if sent:
        logger.info(f"Email notification sent for {form_type} submission to {settings.admin_email}")
    else:
        logger.warning(f"Email service not configured. Skipping email notification for {form_type}.")
    return sent
