"""Standard response envelope for the notifier API."""

from typing import Any, Optional


def single_response(item: Any) -> dict:
    return {"data": item}


def error_response(code: int, message: str, **extra: Optional[Any]) -> dict:
    error = {"code": code, "message": message}
    error.update({k: v for k, v in extra.items() if v is not None})
    return {"error": error}
