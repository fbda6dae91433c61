"""Uniform response envelope"""

from typing import Any, Dict

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def success(data: Any) -> Dict[str, Any]:
    """Wrap a payload as {status: success, data}; dataclasses and Decimals are encoded"""
    return {"status": "success", "data": jsonable_encoder(data)}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message})
