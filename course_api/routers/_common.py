from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from course_api.services.errors import ServiceError, ValidationError


def get_state_service(request: Request, name: str):
    svc = getattr(getattr(request.app, "state", None), name, None)
    if not svc:
        raise RuntimeError(f"{name} is not configured")
    return svc


async def read_payload(request: Request) -> dict:
    """Accept a JSON object or a urlencoded/multipart form body."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)
    if not await request.body():
        return {}
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Request body must be a JSON object")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def error_response(err: ServiceError) -> JSONResponse:
    return JSONResponse({"error": err.message}, status_code=err.status_code)
