from fastapi import APIRouter, Depends, HTTPException, status
import logging
from filemyrti_api.core.dependencies import get_notifier
from filemyrti_api.core.responses import send_success
from filemyrti_api.schemas.forms import ContactCreate
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.utils.email_service import submission_time
from filemyrti_api.utils.validators import clean_phone, is_valid_email

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/public", status_code=status.HTTP_201_CREATED)
async def submit_contact_form(
    payload: ContactCreate,
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    """Contact Us form. Nothing is stored; the admin is notified."""
    first_name = (payload.firstName or "").strip()
    last_name = (payload.lastName or "").strip()
    email = (payload.email or "").strip()
    mobile = (payload.mobile or "").strip()

    if not first_name or not last_name or not email or not mobile:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="First name, last name, email, and mobile number are required"
        )

    if not is_valid_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    digits = clean_phone(mobile)
    if digits is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Mobile number must be between 10 and 13 digits"
        )

    full_name = f"{first_name} {last_name}"
    message = (payload.message or "").strip()
    notifier.dispatch("Contact Us", {
        "Full Name": full_name,
        "Email": email.lower(),
        "Mobile": digits,
        "Message": message or "(Not provided)",
        "Submission Time": submission_time()
    })

    logger.info(f"Contact form submitted: {full_name} - {email}")
    return send_success("Thank you for contacting us! We will get back to you soon.", status_code=status.HTTP_201_CREATED)
