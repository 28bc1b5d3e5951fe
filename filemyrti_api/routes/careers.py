from fastapi import APIRouter, Depends, HTTPException, status
import logging
from filemyrti_api.core.dependencies import get_notifier
from filemyrti_api.core.responses import send_success
from filemyrti_api.schemas.forms import CareerApplicationCreate
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.utils.email_service import submission_time
from filemyrti_api.utils.validators import clean_phone, is_valid_email

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/public", status_code=status.HTTP_201_CREATED)
async def submit_career_application(
    payload: CareerApplicationCreate,
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    """Career application (JSON body, no resume upload). Only notifies the admin."""
    name = (payload.name or "").strip()
    email = (payload.email or "").strip()
    phone = (payload.phone or "").strip()
    position = (payload.position or "").strip()

    if not name or not email or not phone or not position:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name, email, phone, and position are required"
        )

    if not is_valid_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    digits = clean_phone(phone)
    if digits is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Phone number must be between 10 and 13 digits"
        )

    cover_letter = (payload.coverLetter or "").strip()
    notifier.dispatch("Career Application", {
        "Name": name,
        "Email": email.lower(),
        "Phone": digits,
        "Position Applied For": position,
        "Cover Letter": cover_letter or "(Not provided)",
        "Submission Time": submission_time()
    })

    logger.info(f"Career application submitted: {name} - {position} - {email}")
    return send_success(
        "Thank you for your application! We have received your information and will get back to you soon.",
        status_code=status.HTTP_201_CREATED
    )
