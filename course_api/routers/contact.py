from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from course_api.repositories.base import StorageError
from course_api.routers._common import error_response, get_state_service, read_payload
from course_api.services.contact_service import ContactService
from course_api.services.errors import ServiceError

router = APIRouter(prefix="/api/contact", tags=["contact"])
logger = logging.getLogger(__name__)

THANK_YOU = "Thank you for your message! We will get back to you soon."


def _get_contact_service(request: Request) -> ContactService:
    return get_state_service(request, "contact_service")


@router.post("")
async def submit_contact(request: Request):
    svc = _get_contact_service(request)
    try:
        payload = await read_payload(request)
        submission = await run_in_threadpool(
            svc.submit,
            payload.get("name"),
            payload.get("email"),
            payload.get("subject"),
            payload.get("message"),
        )
    except ServiceError as exc:
        return error_response(exc)
    except StorageError:
        logger.exception("Error storing contact submission")
        return JSONResponse({"error": "Failed to store contact form"}, status_code=500)
    return {"success": True, "message": THANK_YOU, "id": submission.id}


@router.get("/submissions")
def list_submissions(request: Request):
    svc = _get_contact_service(request)
    return [record.to_dict() for record in svc.list_submissions()]
