from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from filemyrti_api.database import get_db
from filemyrti_api.models.user import User
from filemyrti_api.core.security import verify_access_token
from filemyrti_api.services.notifications import NotificationDispatcher
from filemyrti_api.services.payment_gateway import RazorpayGateway


def get_current_user(
    token_payload: dict = Depends(verify_access_token),
    db: Session = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user from the database.
    Validates the bearer token and returns the User object.
    """
    user_id = token_payload.get("id")

    user = db.query(User).filter(User.id == int(user_id)).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def require_role(allowed_roles: list):
    """
    Dependency factory to check if user has required role.
    Usage: Depends(require_role(["admin"]))
    """
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            if allowed_roles == ["admin"]:
                detail = "Access denied. Admin privileges required."
            else:
                detail = "Access denied. Insufficient privileges."
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=detail
            )
        return current_user
    return role_checker


require_admin = require_role(["admin"])


def get_payment_gateway(request: Request) -> RazorpayGateway:
    """The gateway built once at startup (see main.lifespan)."""
    return request.app.state.payment_gateway


def get_notifier(request: Request) -> NotificationDispatcher:
    """The notification dispatcher started with the application."""
    return request.app.state.notifier
