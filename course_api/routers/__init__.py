"""
FastAPI routers grouped by domain (enrollments, contact).

Each module exposes an APIRouter included by course_api.app.create_app. Routers
fetch their service from app.state and translate ServiceError into JSON errors.
"""
