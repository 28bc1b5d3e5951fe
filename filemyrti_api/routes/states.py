import logging
from fastapi import APIRouter, Depends, status, HTTPException
from sqlalchemy.orm import Session

from filemyrti_api.database import get_db
from filemyrti_api.models.state import State
from filemyrti_api.models.user import User
from filemyrti_api.schemas.catalog import StateCreate, StateResponse, StateUpdate
from filemyrti_api.core.dependencies import require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success
from filemyrti_api.utils.validators import normalize_slug

router = APIRouter(tags=["states"])
logger = logging.getLogger(__name__)


def _state_view(state: State) -> dict:
    return StateResponse.model_validate(state).model_dump()


@router.get("", summary="Get all states")
def get_all_states(db: Session = Depends(get_db)):
    try:
        states = db.query(State).order_by(State.name).all()
        logger.info(f"Successfully retrieved {len(states)} states")
        return send_success("States retrieved successfully", [_state_view(s) for s in states])
    except Exception as e:
        logger.error(f"Unexpected error fetching states: {str(e)}")
        raise database_error_to_http(e, "Failed to fetch states")


@router.get("/{slug}", summary="Get state by slug")
def get_state(slug: str, db: Session = Depends(get_db)):
    """Slugs are matched trimmed and lower-cased."""
    slug = normalize_slug(slug)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="State slug is required")

    state = db.query(State).filter(State.slug == slug).first()
    if not state:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="State not found")
    return send_success("State retrieved successfully", _state_view(state))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create state")
def create_state(
    state_data: StateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    try:
        existing = db.query(State).filter(State.slug == state_data.slug).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="State with this slug already exists"
            )

        state = State(**state_data.model_dump())
        db.add(state)
        db.commit()
        db.refresh(state)
        logger.info(f"State created: {state.id} ({state.slug})")
        return send_success("State created successfully", _state_view(state), status.HTTP_201_CREATED)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating state: {str(e)}")
        raise database_error_to_http(e, "Failed to create state")


@router.put("/{state_id}", summary="Update state")
def update_state(
    state_id: int,
    state_data: StateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    try:
        state = db.query(State).filter(State.id == state_id).first()
        if not state:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="State not found")

        for field, value in state_data.model_dump(exclude_unset=True).items():
            setattr(state, field, value)

        db.commit()
        db.refresh(state)
        return send_success("State updated successfully", _state_view(state))
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating state {state_id}: {str(e)}")
        raise database_error_to_http(e, "Failed to update state")


@router.delete("/{state_id}", summary="Delete state")
def delete_state(
    state_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    try:
        state = db.query(State).filter(State.id == state_id).first()
        if not state:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="State not found")

        db.delete(state)
        db.commit()
        logger.info(f"State deleted: {state_id}")
        return send_success("State deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting state {state_id}: {str(e)}")
        raise database_error_to_http(e, "Failed to delete state")
