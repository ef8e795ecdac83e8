"""FastAPI application factory for the course enrollment API."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from course_api.core.config import Settings, get_settings
from course_api.domain.records import format_timestamp, utcnow
from course_api.repositories import RecordStore, StorageError, build_store
from course_api.routers import contact as contact_router
from course_api.routers import enrollments as enrollments_router
from course_api.services.contact_service import ContactService
from course_api.services.enrollment_service import EnrollmentService

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:3000",
    "http://localhost:3001",
    "http://127.0.0.1:3000",
}


def _allowed_origins(settings: Settings) -> list[str]:
    origins = set(settings.cors_origins)
    if settings.app_env != "prod":
        origins.update(DEV_ORIGINS)
    return sorted(origin for origin in origins if origin)


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Build the app around an explicitly constructed store (one is built from settings if omitted)."""
    settings = settings or get_settings()
    store = store if store is not None else build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            store.initialize()
        except StorageError:
            logger.exception("Store initialization failed; requests will retry")
        yield
        store.close()

    app = FastAPI(title="Course Enrollment API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.enrollment_service = EnrollmentService(store)
    app.state.contact_service = ContactService(store)

    allowed_cors = _allowed_origins(settings)
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_cors,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(enrollments_router.router)
    app.include_router(contact_router.router)

    @app.get("/api/health")
    def health():
        return {"status": "OK", "timestamp": format_timestamp(utcnow())}

    return app
