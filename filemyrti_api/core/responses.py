"""
Standard JSON envelope used by every endpoint:

    {"success": bool, "message": str, "data": ..., "errors": [...]}

``data`` and ``errors`` are only present when set.
"""
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def send_response(status_code: int, success: bool, message: str, data: Any = None, errors: Any = None) -> JSONResponse:
    content = {"success": success, "message": message}
    if data is not None:
        content["data"] = data
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def send_success(message: str, data: Any = None, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return send_response(status_code, True, message, data)


def send_error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST, errors: Optional[list] = None) -> JSONResponse:
    return send_response(status_code, False, message, None, errors)
