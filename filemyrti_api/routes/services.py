import logging
from fastapi import APIRouter, Depends, status, HTTPException
from sqlalchemy.orm import Session

from filemyrti_api.database import get_db
from filemyrti_api.models.service import Service
from filemyrti_api.models.user import User
from filemyrti_api.schemas.catalog import ServiceCreate, ServiceResponse, ServiceUpdate
from filemyrti_api.core.dependencies import require_admin
from filemyrti_api.core.errors import database_error_to_http
from filemyrti_api.core.responses import send_success
from filemyrti_api.utils.validators import normalize_slug

router = APIRouter(tags=["services"])
logger = logging.getLogger(__name__)


def _service_view(service: Service) -> dict:
    return ServiceResponse.model_validate(service).model_dump()


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="Get all services",
    description="Retrieve every RTI service offered, ordered by name"
)
def get_all_services(db: Session = Depends(get_db)):
    """Public list of services."""
    try:
        services = db.query(Service).order_by(Service.name).all()
        logger.info(f"Successfully retrieved {len(services)} services")
        return send_success("Services retrieved successfully", [_service_view(s) for s in services])
    except Exception as e:
        logger.error(f"Unexpected error fetching services: {str(e)}")
        raise database_error_to_http(e, "Failed to fetch services")


@router.get(
    "/{slug}",
    status_code=status.HTTP_200_OK,
    summary="Get service by slug"
)
def get_service(slug: str, db: Session = Depends(get_db)):
    slug = normalize_slug(slug)
    if not slug:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Service slug is required")

    service = db.query(Service).filter(Service.slug == slug).first()
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return send_success("Service retrieved successfully", _service_view(service))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create service"
)
def create_service(
    service_data: ServiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Create a service. Requires admin role.

    Raises:
        HTTPException: 409 if the slug is already taken
    """
    try:
        existing = db.query(Service).filter(Service.slug == service_data.slug).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Service with this slug already exists"
            )

        service = Service(**service_data.model_dump())
        db.add(service)
        db.commit()
        db.refresh(service)
        logger.info(f"Service created: {service.id} ({service.slug})")
        return send_success("Service created successfully", _service_view(service), status.HTTP_201_CREATED)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating service: {str(e)}")
        raise database_error_to_http(e, "Failed to create service")


@router.put(
    "/{service_id}",
    status_code=status.HTTP_200_OK,
    summary="Update service"
)
def update_service(
    service_id: int,
    service_data: ServiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    try:
        service = db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")

        for field, value in service_data.model_dump(exclude_unset=True).items():
            setattr(service, field, value)

        db.commit()
        db.refresh(service)
        logger.info(f"Service updated: {service.id}")
        return send_success("Service updated successfully", _service_view(service))
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating service {service_id}: {str(e)}")
        raise database_error_to_http(e, "Failed to update service")


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_200_OK,
    summary="Delete service"
)
def delete_service(
    service_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    try:
        service = db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")

        db.delete(service)
        db.commit()
        logger.info(f"Service deleted: {service_id}")
        return send_success("Service deleted successfully")
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting service {service_id}: {str(e)}")
        raise database_error_to_http(e, "Failed to delete service")
