from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional, Tuple
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.rti_application import APPLICATION_STATUSES, RTIApplication
from filemyrti_api.models.service import Service
from filemyrti_api.models.state import State
from filemyrti_api.models.user import User
from filemyrti_api.schemas.rti_application import (
    RTIApplicationCreate,
    RTIApplicationUpdate,
    RTIApplicationStatusUpdate
)
from filemyrti_api.core.dependencies import get_current_user, get_notifier, require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success
from filemyrti_api.services.applications import (
    application_view,
    handle_submission_failure,
    list_applications,
    notification_fields,
    submit_application
)
from filemyrti_api.services.notifications import NotificationDispatcher

router = APIRouter()
logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Failed to create RTI application. Please try again or contact support."


def _require_service_and_state(db: Session, payload: RTIApplicationCreate) -> Tuple[Service, State]:
    """Both referenced rows must exist before anything is written."""
    service = db.query(Service).filter(Service.id == payload.service_id).first()
    if not service:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Service with ID {payload.service_id} does not exist. Please ensure the service exists in the database."
        )
    state = db.query(State).filter(State.id == payload.state_id).first()
    if not state:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"State with ID {payload.state_id} does not exist. Please ensure the state exists in the database."
        )
    return service, state


def _get_owned_application(db: Session, application_id: int, current_user: User) -> RTIApplication:
    application = db.query(RTIApplication).filter(RTIApplication.id == application_id).first()
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    if current_user.role != "admin" and application.user_id != current_user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return application


async def _create(
    request: Request,
    payload: RTIApplicationCreate,
    db: Session,
    notifier: NotificationDispatcher,
    form_type: str,
    user_id: Optional[int] = None
):
    raw_body = await request.json()

    try:
        service, state = _require_service_and_state(db, payload)
    except HTTPException:
        raise
    except Exception as e:
        handle_submission_failure(db, payload, raw_body, e)
        raise database_error_to_http(e, CREATE_FAILED_MESSAGE)

    try:
        application = submit_application(db, payload, raw_body, user_id)
    except Exception as e:
        raise database_error_to_http(e, CREATE_FAILED_MESSAGE)

    logger.info(
        f"RTI application created: {application.id}"
        + (f" by user: {user_id}" if user_id is not None else f" (payment_id={application.payment_id or 'none'})")
    )
    notifier.dispatch(form_type, notification_fields(application, service.name, state.name, user_id))
    return send_success("RTI application created successfully", application_view(application), status.HTTP_201_CREATED)


@router.post("/public", status_code=status.HTTP_201_CREATED)
async def create_public_application(
    payload: RTIApplicationCreate,
    request: Request,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    """
    Submit an RTI application without an account, usually right after checkout.

    If saving fails after a payment was taken, a payment recovery record is
    written for manual follow-up and the original error is still returned.
    """
    return await _create(request, payload, db, notifier, "RTI Application")


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_application(
    payload: RTIApplicationCreate,
    request: Request,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
    current_user: User = Depends(get_current_user)
):
    """Submit an RTI application as the authenticated user"""
    return await _create(request, payload, db, notifier, "RTI Application (Authenticated)", current_user.id)


@router.get("/my-applications")
def get_my_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    result = list_applications(db, {"user_id": current_user.id}, page, limit)
    return send_success("Applications retrieved successfully", result)


@router.get("/")
def get_all_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: Optional[str] = Query(None, alias="status"),
    service_id: Optional[int] = None,
    state_id: Optional[int] = None,
    user_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Admins see every application; other users only see their own."""
    filters = {"status": status_filter, "service_id": service_id, "state_id": state_id}
    if current_user.role != "admin":
        filters["user_id"] = current_user.id
    else:
        filters["user_id"] = user_id

    result = list_applications(db, filters, page, limit)
    return send_success("Applications retrieved successfully", result)


@router.get("/{application_id}")
def get_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    application = _get_owned_application(db, application_id, current_user)
    return send_success("Application retrieved successfully", application_view(application))


@router.put("/{application_id}")
def update_application(
    application_id: int,
    application_update: RTIApplicationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    application = _get_owned_application(db, application_id, current_user)

    for field, value in application_update.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(application, field, value.strip() if isinstance(value, str) else value)

    try:
        db.commit()
        db.refresh(application)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating application {application_id}: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Failed to update application")

    logger.info(f"Application updated: {application_id}")
    return send_success("Application updated successfully", application_view(application))


@router.delete("/{application_id}")
def delete_application(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    application = _get_owned_application(db, application_id, current_user)
    db.delete(application)
    db.commit()
    logger.info(f"Application deleted: {application_id}")
    return send_success("Application deleted successfully")


@router.patch("/{application_id}/status")
def update_application_status(
    application_id: int,
    status_update: RTIApplicationStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Update application status (admin only)"""
    if status_update.status not in APPLICATION_STATUSES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status")

    application = db.query(RTIApplication).filter(RTIApplication.id == application_id).first()
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")

    application.status = status_update.status
    db.commit()
    db.refresh(application)

    logger.info(f"Application status updated: {application_id} to {status_update.status}")
    return send_success("Application status updated successfully", application_view(application))
