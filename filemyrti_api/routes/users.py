from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from math import ceil
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.user import User
from filemyrti_api.schemas.user import UserUpdate, UserResponse
from filemyrti_api.core.dependencies import get_current_user, require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_self_or_admin(current_user: User, user_id: int, detail: str):
    if current_user.id != user_id and current_user.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


@router.get("/")
def get_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Get all users - requires admin role"""
    query = db.query(User)
    total = query.count()
    users = query.order_by(User.created_at.desc(), User.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return send_success("Users retrieved successfully", {
        "users": [UserResponse.model_validate(user).model_dump() for user in users],
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": ceil(total / limit)
    })


@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific user. Users can only read themselves unless admin"""
    _check_self_or_admin(current_user, user_id, "Access denied. You can only view your own profile.")

    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return send_success("User retrieved successfully", UserResponse.model_validate(db_user).model_dump())


@router.put("/{user_id}")
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a user. Users can only update themselves unless admin"""
    _check_self_or_admin(current_user, user_id, "Access denied. You can only update your own profile.")

    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    # Check if email is being changed and if it's already taken
    if user_update.email and user_update.email.lower() != db_user.email:
        email_exists = db.query(User).filter(User.email == user_update.email.lower()).first()
        if email_exists:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already in use")
        db_user.email = user_update.email.lower()

    if user_update.name is not None:
        db_user.name = user_update.name.strip()
    if user_update.phone is not None:
        db_user.phone = user_update.phone

    try:
        db.commit()
        db.refresh(db_user)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user {user_id}: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Failed to update user")

    return send_success("User updated successfully", UserResponse.model_validate(db_user).model_dump())


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Delete a user - requires admin role"""
    db_user = db.query(User).filter(User.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")

    db.delete(db_user)
    db.commit()
    logger.info(f"User {user_id} deleted by admin {current_user.id}")
    return send_success("User deleted successfully")
