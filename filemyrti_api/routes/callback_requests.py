from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from typing import Optional
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.callback_request import CallbackRequest
from filemyrti_api.models.user import User
from filemyrti_api.schemas.forms import CallbackRequestCreate, CallbackRequestResponse, StatusUpdate
from filemyrti_api.core.dependencies import get_notifier, require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.utils.validators import clean_phone

router = APIRouter()
logger = logging.getLogger(__name__)


def _callback_view(callback_request: CallbackRequest) -> dict:
    return CallbackRequestResponse.model_validate(callback_request).model_dump()


@router.post("/public", status_code=status.HTTP_201_CREATED)
async def create_callback_request(
    payload: CallbackRequestCreate,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    phone = (payload.phone or "").strip()
    if not phone:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Phone number is required")

    digits = clean_phone(phone)
    if digits is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Phone number must be between 10 and 13 digits"
        )

    try:
        callback_request = CallbackRequest(phone=digits, state_slug=payload.state_slug or None)
        db.add(callback_request)
        db.commit()
        db.refresh(callback_request)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating callback request: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Failed to submit callback request")

    logger.info(f"Callback request created: ID {callback_request.id}, Phone: {digits}")

    notifier.dispatch("Callback Request", {
        "Phone": digits,
        "State Slug": callback_request.state_slug or "(Not provided)",
        "Submission ID": callback_request.id
    })
    return send_success("Callback request submitted successfully", _callback_view(callback_request), status.HTTP_201_CREATED)


@router.get("/")
def get_all_callback_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    state_slug: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    query = db.query(CallbackRequest)
    if status_filter:
        query = query.filter(CallbackRequest.status == status_filter)
    if state_slug:
        query = query.filter(CallbackRequest.state_slug == state_slug)
    query = query.order_by(CallbackRequest.created_at.desc(), CallbackRequest.id.desc())
    if limit:
        query = query.limit(limit)

    return send_success("Callback requests retrieved successfully", [_callback_view(c) for c in query.all()])


@router.get("/{callback_id}")
def get_callback_request(
    callback_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    callback_request = db.query(CallbackRequest).filter(CallbackRequest.id == callback_id).first()
    if not callback_request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Callback request not found")
    return send_success("Callback request retrieved successfully", _callback_view(callback_request))


@router.patch("/{callback_id}/status")
def update_callback_status(
    callback_id: int,
    status_update: StatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Marking a request "called" stamps called_at."""
    if not status_update.status:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Status is required")

    callback_request = db.query(CallbackRequest).filter(CallbackRequest.id == callback_id).first()
    if not callback_request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Callback request not found")

    callback_request.status = status_update.status
    if status_update.notes is not None:
        callback_request.notes = status_update.notes
    if status_update.status == "called":
        callback_request.called_at = func.now()
    db.commit()
    db.refresh(callback_request)

    return send_success("Callback request status updated successfully", _callback_view(callback_request))
