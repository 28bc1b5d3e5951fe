"""
RTI application persistence with the payment-recovery fallback.

    received -> validated -> persisted
    received -> validated -> persist_failed -> recovery_attempted
                                            -> recovery_persisted | recovery_failed

Validation happens in the schema and the route (service/state must exist).
A lookup that fails for any reason other than a missing row is treated like
a failed insert.
When the insert fails and the request carried both ``payment_id`` and
``order_id``, a PaymentRecovery row is written so the captured charge can be
reconciled by hand. The original error is always re-raised: recovery is an
operator-side net, never a silent success, and a failed recovery write is
only logged.

The two writes are independent commits; there is no transaction spanning them.
"""
import logging
from math import ceil
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from filemyrti_api.models.payment_recovery import PaymentRecovery
from filemyrti_api.models.rti_application import RTIApplication
from filemyrti_api.schemas.rti_application import RTIApplicationCreate, RTIApplicationResponse

logger = logging.getLogger(__name__)

NOTIFICATION_QUERY_PREVIEW = 500
NOT_PROVIDED = "(Not provided)"


def create_application(db: Session, payload: RTIApplicationCreate, user_id: Optional[int] = None) -> RTIApplication:
    application = RTIApplication(
        user_id=user_id,
        service_id=payload.service_id,
        state_id=payload.state_id,
        full_name=payload.full_name,
        mobile=payload.mobile,
        email=payload.email,
        rti_query=payload.rti_query or "",
        address=payload.address,
        pincode=payload.pincode,
        payment_id=payload.payment_id,
        order_id=payload.order_id,
        status="pending",
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


def record_payment_recovery(
    db: Session,
    payload: RTIApplicationCreate,
    raw_body: Any,
    error: Exception,
) -> Optional[PaymentRecovery]:
    """
    Best-effort write of a recovery row. Never raises.

    No deduplication on payment_id: every failed attempt gets its own row.
    """
    try:
        recovery = PaymentRecovery(
            payment_id=payload.payment_id,
            order_id=payload.order_id,
            service_id=payload.service_id,
            state_id=payload.state_id,
            full_name=payload.full_name or "",
            mobile=payload.mobile or "",
            email=payload.email or "",
            rti_query=payload.rti_query or "",
            address=payload.address or "",
            pincode=payload.pincode or "",
            error_message=str(error),
            request_body=raw_body,
            status="pending",
        )
        db.add(recovery)
        db.commit()
        db.refresh(recovery)
    except Exception as recovery_error:
        db.rollback()
        logger.error(
            f"Failed to create payment recovery record for payment_id={payload.payment_id} "
            f"order_id={payload.order_id}: {str(recovery_error)}",
            exc_info=True
        )
        return None

    logger.warning(f"Payment recovery record {recovery.id} created: payment_id={payload.payment_id} order_id={payload.order_id}")
    return recovery


def handle_submission_failure(
    db: Session,
    payload: RTIApplicationCreate,
    raw_body: Any,
    error: Exception,
) -> None:
    """Roll back, log, and write a recovery row when the request carried both payment ids."""
    db.rollback()
    logger.error(
        f"Error creating RTI application: {str(error)} "
        f"(payment_id={payload.payment_id or 'none'}, order_id={payload.order_id or 'none'})",
        exc_info=True
    )
    if payload.payment_id and payload.order_id:
        record_payment_recovery(db, payload, raw_body, error)


def submit_application(
    db: Session,
    payload: RTIApplicationCreate,
    raw_body: Any,
    user_id: Optional[int] = None,
) -> RTIApplication:
    """Persist a validated application; on failure write a recovery row and re-raise."""
    try:
        return create_application(db, payload, user_id)
    except Exception as e:
        handle_submission_failure(db, payload, raw_body, e)
        raise


def application_view(application: RTIApplication) -> Dict[str, Any]:
    view = RTIApplicationResponse(
        id=application.id,
        user_id=application.user_id,
        service_id=application.service_id,
        state_id=application.state_id,
        full_name=application.full_name,
        mobile=application.mobile,
        email=application.email,
        rti_query=application.rti_query or "",
        address=application.address,
        pincode=application.pincode,
        payment_id=application.payment_id,
        order_id=application.order_id,
        status=application.status,
        created_at=application.created_at,
        updated_at=application.updated_at,
        user_name=application.user.name if application.user else None,
        user_email=application.user.email if application.user else None,
        service_name=application.service.name if application.service else None,
        state_name=application.state.name if application.state else None,
    )
    return view.model_dump()


def list_applications(db: Session, filters: Dict[str, Any], page: int = 1, limit: int = 10) -> Dict[str, Any]:
    query = db.query(RTIApplication)
    for column in ("user_id", "status", "service_id", "state_id"):
        if filters.get(column) is not None:
            query = query.filter(getattr(RTIApplication, column) == filters[column])

    total = query.count()
    applications = (
        query.order_by(RTIApplication.created_at.desc(), RTIApplication.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "applications": [application_view(application) for application in applications],
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": ceil(total / limit) if limit else 0,
    }


def notification_fields(application: RTIApplication, service_name: str, state_name: str, user_id: Optional[int] = None) -> Dict[str, Any]:
    query = application.rti_query or ""
    if query:
        preview = query[:NOTIFICATION_QUERY_PREVIEW] + ("..." if len(query) > NOTIFICATION_QUERY_PREVIEW else "")
    else:
        preview = NOT_PROVIDED

    fields: Dict[str, Any] = {"Application ID": application.id}
    if user_id is not None:
        fields["User ID"] = user_id
    fields.update({
        "Full Name": application.full_name,
        "Email": application.email,
        "Mobile": application.mobile,
        "Service": service_name,
        "State": state_name,
        "RTI Query": preview,
        "Address": application.address,
        "Pincode": application.pincode,
    })
    if user_id is None:
        fields["Payment ID"] = application.payment_id or NOT_PROVIDED
        fields["Order ID"] = application.order_id or NOT_PROVIDED
    return fields
