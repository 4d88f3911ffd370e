from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Any


def success_resp(message: str, data: Any = None, status_code: int = 200):
    """
    Standardized Success Response
    """
    if data is None:
        data = {}
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "success": True,
            "message": message,
            "data": data
        })
    )


def error_resp(message: str, status_code: int = 500, data: Any = None):
    """
    Standardized Error Response
    """
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "success": False,
            "message": message,
            "data": data if data is not None else {}
        })
    )


def fmt_time(value) -> str:
    """Render a timestamp the way the log screen shows it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.strftime("%Y-%m-%d %H:%M:%S")
