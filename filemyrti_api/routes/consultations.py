from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.consultation import Consultation
from filemyrti_api.models.user import User
from filemyrti_api.schemas.forms import ConsultationCreate, ConsultationResponse, StatusUpdate
from filemyrti_api.core.dependencies import get_notifier, require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.utils.validators import clean_phone, is_valid_email

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_PROVIDED = "(Not provided)"
DEFAULT_SOURCE = "hero_section"


def _consultation_view(consultation: Consultation) -> dict:
    return ConsultationResponse.model_validate(consultation).model_dump()


@router.post("/public", status_code=status.HTTP_201_CREATED)
async def create_consultation(
    payload: ConsultationCreate,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    """Consultation form from the hero section. Only name, email and mobile are required."""
    full_name = (payload.full_name or "").strip()
    email = (payload.email or "").strip()
    mobile = (payload.mobile or "").strip()

    if not full_name or not email or not mobile:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name, email, and mobile number are required"
        )

    if not is_valid_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")

    digits = clean_phone(mobile)
    if digits is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Mobile number must be between 10 and 13 digits"
        )

    try:
        consultation = Consultation(
            full_name=full_name,
            email=email.lower(),
            mobile=digits,
            address=(payload.address or "").strip(),
            pincode=(payload.pincode or "").strip(),
            state_slug=payload.state_slug or None,
            source=payload.source or DEFAULT_SOURCE
        )
        db.add(consultation)
        db.commit()
        db.refresh(consultation)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating consultation: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Failed to submit consultation")

    logger.info(f"Consultation created: ID {consultation.id}, Email: {consultation.email}")

    notifier.dispatch("Consultation", {
        "Full Name": consultation.full_name,
        "Email": consultation.email,
        "Mobile": consultation.mobile,
        "Address": consultation.address or NOT_PROVIDED,
        "Pincode": consultation.pincode or NOT_PROVIDED,
        "State Slug": consultation.state_slug or NOT_PROVIDED,
        "Source": consultation.source,
        "Submission ID": consultation.id
    })
    return send_success("Consultation submitted successfully", _consultation_view(consultation), status.HTTP_201_CREATED)


@router.get("/")
def get_all_consultations(
    status_filter: Optional[str] = Query(None, alias="status"),
    state_slug: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    query = db.query(Consultation)
    if status_filter:
        query = query.filter(Consultation.status == status_filter)
    if state_slug:
        query = query.filter(Consultation.state_slug == state_slug)
    query = query.order_by(Consultation.created_at.desc(), Consultation.id.desc())
    if limit:
        query = query.limit(limit)

    consultations = query.all()
    return send_success("Consultations retrieved successfully", [_consultation_view(c) for c in consultations])


@router.get("/{consultation_id}")
def get_consultation(
    consultation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    consultation = db.query(Consultation).filter(Consultation.id == consultation_id).first()
    if not consultation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Consultation not found")
    return send_success("Consultation retrieved successfully", _consultation_view(consultation))


@router.patch("/{consultation_id}/status")
def update_consultation_status(
    consultation_id: int,
    status_update: StatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    if not status_update.status:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status is required")

    consultation = db.query(Consultation).filter(Consultation.id == consultation_id).first()
    if not consultation:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Consultation not found")

    consultation.status = status_update.status
    if status_update.notes is not None:
        consultation.notes = status_update.notes
    db.commit()
    db.refresh(consultation)

    return send_success("Consultation status updated successfully", _consultation_view(consultation))
