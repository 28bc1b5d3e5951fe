from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, DatabaseError, OperationalError


def database_error_to_http(e: Exception, default_message: str) -> HTTPException:
    """Translate a persistence failure into the HTTPException reported to the client."""
    if isinstance(e, IntegrityError):
        error_msg = str(e.orig) if hasattr(e, 'orig') else str(e)

        if "unique constraint" in error_msg.lower() or "duplicate" in error_msg.lower():
            return HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Duplicate entry. This record already exists."
            )
        if "foreign key" in error_msg.lower():
            return HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Referenced record does not exist."
            )
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Required fields are missing or invalid."
        )

    if isinstance(e, OperationalError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Unable to connect to the database. Please try again later."
        )

    if isinstance(e, DatabaseError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="A database error occurred. Please verify your data and try again."
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=default_message
    )
