from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.newsletter import NewsletterSubscription
from filemyrti_api.models.user import User
from filemyrti_api.schemas.forms import NewsletterRequest, NewsletterResponse
from filemyrti_api.core.dependencies import get_notifier, require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.utils.email_service import submission_time
from filemyrti_api.utils.validators import is_valid_email

router = APIRouter()
logger = logging.getLogger(__name__)


def _subscription_view(subscription: NewsletterSubscription) -> dict:
    return NewsletterResponse.model_validate(subscription).model_dump()


def _clean_email(payload: NewsletterRequest) -> str:
    email = (payload.email or "").strip()
    if not email:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email address is required")
    if not is_valid_email(email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid email format")
    return email.lower()


@router.post("/subscribe")
async def subscribe(
    payload: NewsletterRequest,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier)
):
    """
    Subscribe an email address.

    New address -> 201; already active -> 200 unchanged; previously
    unsubscribed -> reactivated with 200.
    """
    email = _clean_email(payload)

    existing = db.query(NewsletterSubscription).filter(NewsletterSubscription.email == email).first()
    if existing:
        if existing.status == "active":
            return send_success("You are already subscribed to our newsletter", _subscription_view(existing))

        existing.status = "active"
        db.commit()
        db.refresh(existing)
        logger.info(f"Newsletter subscription reactivated: {email}")

        notifier.dispatch("Newsletter Subscription (Reactivated)", {
            "Email": email,
            "Subscription ID": existing.id,
            "Status": "Reactivated",
            "Subscription Time": existing.subscribed_at
        })
        return send_success("You have been resubscribed to our newsletter", _subscription_view(existing))

    try:
        subscription = NewsletterSubscription(email=email, status="active")
        db.add(subscription)
        db.commit()
        db.refresh(subscription)
    except IntegrityError:
        # Lost a race with a concurrent subscribe for the same address
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This email is already subscribed")
    except Exception as e:
        db.rollback()
        logger.error(f"Error subscribing to newsletter: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Failed to subscribe to newsletter")

    logger.info(f"Newsletter subscription created: ID {subscription.id}, Email: {email}")

    notifier.dispatch("Newsletter Subscription", {
        "Email": email,
        "Subscription ID": subscription.id,
        "Subscribed At": subscription.subscribed_at,
        "Submission Time": submission_time()
    })
    return send_success("Successfully subscribed to newsletter", _subscription_view(subscription), status.HTTP_201_CREATED)


@router.post("/unsubscribe")
def unsubscribe(payload: NewsletterRequest, db: Session = Depends(get_db)):
    email = _clean_email(payload)

    subscription = db.query(NewsletterSubscription).filter(NewsletterSubscription.email == email).first()
    if not subscription:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email not found in our subscription list")

    subscription.status = "unsubscribed"
    db.commit()
    logger.info(f"Newsletter unsubscribed: {email}")
    return send_success("Successfully unsubscribed from newsletter")


@router.get("/")
def get_all_subscriptions(
    status_filter: str = Query("active", alias="status"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    subscriptions = (
        db.query(NewsletterSubscription)
        .filter(NewsletterSubscription.status == status_filter)
        .order_by(NewsletterSubscription.subscribed_at.desc(), NewsletterSubscription.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return send_success("Subscriptions retrieved successfully", [_subscription_view(s) for s in subscriptions])
