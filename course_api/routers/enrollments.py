from __future__ import annotations

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from course_api.routers._common import error_response, get_state_service, read_payload
from course_api.services.enrollment_service import EnrollmentService
from course_api.services.errors import ServiceError

router = APIRouter(prefix="/api/enrollments", tags=["enrollments"])


def _get_enrollment_service(request: Request) -> EnrollmentService:
    return get_state_service(request, "enrollment_service")


@router.get("")
def list_enrollments(request: Request):
    svc = _get_enrollment_service(request)
    return [record.to_dict() for record in svc.list_enrollments()]


@router.get("/check/{course_title}/{email}")
def check_enrollment(course_title: str, email: str, request: Request):
    svc = _get_enrollment_service(request)
    enrolled, record = svc.check_enrollment(course_title, email)
    return {"enrolled": enrolled, "user": record.to_dict() if record else None}


@router.get("/stats")
def enrollment_stats(request: Request):
    svc = _get_enrollment_service(request)
    return svc.stats().to_dict()


@router.post("")
async def enroll(request: Request):
    svc = _get_enrollment_service(request)
    try:
        payload = await read_payload(request)
        record = await run_in_threadpool(
            svc.enroll,
            payload.get("email"),
            payload.get("name"),
            payload.get("courseTitle"),
        )
    except ServiceError as exc:
        return error_response(exc)
    return {
        "id": record.id,
        "email": record.email,
        "name": record.name,
        "courseTitle": record.course_title,
        "enrolledAt": record.enrolled_at,
        "message": "Successfully enrolled!",
    }
