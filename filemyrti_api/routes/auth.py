from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
import logging
from filemyrti_api.database import get_db
from filemyrti_api.models.user import User
from filemyrti_api.schemas.user import UserRegister, UserLogin, UserResponse
from filemyrti_api.core.security import create_access_token, hash_password, verify_password
from filemyrti_api.core.dependencies import get_current_user
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success

router = APIRouter()
logger = logging.getLogger(__name__)


def _issue_token(user: User) -> str:
    return create_access_token({"id": user.id, "email": user.email, "role": user.role})


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    try:
        # Check if email already exists
        db_user = db.query(User).filter(User.email == user.email).first()
        if db_user:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User with this email already exists"
            )

        db_user = User(
            name=user.name,
            email=user.email,
            password=hash_password(user.password),
            phone=user.phone,
            role="user"
        )
        db.add(db_user)
        db.commit()
        db.refresh(db_user)

        logger.info(f"User registered: {db_user.id} ({db_user.email})")
        return send_success(
            "User registered successfully",
            {"user": UserResponse.model_validate(db_user).model_dump(), "token": _issue_token(db_user)},
            status.HTTP_201_CREATED
        )
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Registration error: {str(e)}", exc_info=True)
        raise database_error_to_http(e, "Registration failed")


@router.post("/login")
def login(userdetails: UserLogin, db: Session = Depends(get_db)):
    logger.info(f"Authenticating user with email: {userdetails.email}")
    db_user = db.query(User).filter(User.email == userdetails.email).first()
    if not db_user or not verify_password(userdetails.password, db_user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    return send_success(
        "Login successful",
        {"user": UserResponse.model_validate(db_user).model_dump(), "token": _issue_token(db_user)}
    )


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    """Profile of the authenticated user"""
    return send_success("Profile retrieved successfully", UserResponse.model_validate(current_user).model_dump())
