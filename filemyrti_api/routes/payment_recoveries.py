"""
Admin view of payments whose RTI application could not be saved.

Rows are created by the public application flow; admins reconcile them by
re-entering the application and marking the row processed (optionally with the
new application id) or failed.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.payment_recovery import PaymentRecovery
from filemyrti_api.models.user import User
from filemyrti_api.schemas.payment_recovery import PaymentRecoveryResponse, PaymentRecoveryStatusUpdate, RecoveryStatus
from filemyrti_api.core.dependencies import require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success

router = APIRouter()
logger = logging.getLogger(__name__)


def _recovery_view(recovery: PaymentRecovery) -> dict:
    return PaymentRecoveryResponse.model_validate(recovery).model_dump()


@router.get("/")
def list_recoveries(
    status_filter: RecoveryStatus = Query("pending", alias="status"),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Oldest first, so the longest-waiting payments are handled first."""
    recoveries = (
        db.query(PaymentRecovery)
        .filter(PaymentRecovery.status == status_filter)
        .order_by(PaymentRecovery.created_at.asc(), PaymentRecovery.id.asc())
        .limit(limit)
        .all()
    )
    return send_success("Payment recoveries retrieved successfully", [_recovery_view(r) for r in recoveries])


@router.get("/by-payment/{payment_id}")
def get_recovery_by_payment(
    payment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Latest recovery row for a Razorpay payment id."""
    recovery = (
        db.query(PaymentRecovery)
        .filter(PaymentRecovery.payment_id == payment_id)
        .order_by(PaymentRecovery.created_at.desc(), PaymentRecovery.id.desc())
        .first()
    )
    if not recovery:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment recovery record not found")
    return send_success("Payment recovery retrieved successfully", _recovery_view(recovery))


@router.get("/{recovery_id}")
def get_recovery(
    recovery_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    recovery = db.query(PaymentRecovery).filter(PaymentRecovery.id == recovery_id).first()
    if not recovery:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment recovery record not found")
    return send_success("Payment recovery retrieved successfully", _recovery_view(recovery))


@router.patch("/{recovery_id}/status")
def update_recovery_status(
    recovery_id: int,
    status_update: PaymentRecoveryStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    recovery = db.query(PaymentRecovery).filter(PaymentRecovery.id == recovery_id).first()
    if not recovery:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment recovery record not found")

    recovery.status = status_update.status
    if status_update.application_id is not None:
        recovery.application_id = status_update.application_id

    try:
        db.commit()
        db.refresh(recovery)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating payment recovery {recovery_id}: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Failed to update payment recovery")

    logger.info(
        f"Payment recovery {recovery_id} marked {status_update.status} by admin {current_user.id}"
        + (f" (application {recovery.application_id})" if recovery.application_id else "")
    )
    return send_success("Payment recovery status updated successfully", _recovery_view(recovery))
