"""
WhatsApp notifications through the WhatsApp Cloud (Meta Graph) API.

Admin alerts for new form submissions are sent as plain text messages to
WHATSAPP_NOTIFICATION_PHONE. When the channel is not configured the send is
skipped with a warning.
"""
import logging
import re
from typing import Any, Dict, Optional

import httpx

from filemyrti_api.core.config import get_settings
from filemyrti_api.utils.email_service import format_label, submission_time

logger = logging.getLogger(__name__)


class WhatsAppError(Exception):
    pass


def normalize_phone(phone: str) -> str:
    """Digits only, with the Indian country code added to bare 10-digit numbers."""
    clean_phone = re.sub(r"\D", "", phone)
    if len(clean_phone) == 10 and not clean_phone.startswith("91"):
        clean_phone = "91" + clean_phone
    return clean_phone


def format_form_message(form_type: str, form_data: Dict[str, Any]) -> str:
    lines = [f"📋 *New {form_type} Submission*", ""]
    for key, value in form_data.items():
        if value is None or value == "":
            continue
        lines.append(f"*{format_label(key)}:* {value}")
    lines.append("")
    lines.append(f"⏰ {submission_time()}")
    return "\n".join(lines)


async def send_whatsapp_message(phone: str, message: str, client: Optional[httpx.AsyncClient] = None) -> bool:
    """
    Send a text message. Returns False when WhatsApp is not configured.

    Raises:
        WhatsAppError: the API answered with an error status
        httpx.HTTPError: transport failure
    """
    settings = get_settings()
    if not settings.whatsapp_phone_number_id or not settings.whatsapp_access_token:
        logger.warning("WhatsApp Cloud API credentials not configured. Skipping WhatsApp message.")
        return False

    url = f"{settings.whatsapp_api_url}/{settings.whatsapp_phone_number_id}/messages"
    payload = {
        "messaging_product": "whatsapp",
        "to": normalize_phone(phone),
        "type": "text",
        "text": {"body": message},
    }
    headers = {"Authorization": f"Bearer {settings.whatsapp_access_token}"}

    if client is None:
        async with httpx.AsyncClient(timeout=settings.whatsapp_timeout_seconds) as own_client:
            resp = await own_client.post(url, json=payload, headers=headers)
    else:
        resp = await client.post(url, json=payload, headers=headers)

    if resp.status_code >= 400:
        raise WhatsAppError(f"WhatsApp API error {resp.status_code}: {resp.text}")

    logger.info(f"WhatsApp message sent successfully to {phone}")
    return True


async def send_form_submission_notification(form_type: str, form_data: Dict[str, Any]) -> bool:
    """Notify the admin phone about a new form submission."""
    whatsapp_phone = get_settings().whatsapp_notification_phone
    if not whatsapp_phone:
        logger.warning("WhatsApp notification phone not configured. Skipping WhatsApp notification.")
        return False

    return await send_whatsapp_message(whatsapp_phone, format_form_message(form_type, form_data))
