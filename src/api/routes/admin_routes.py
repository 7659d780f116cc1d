# admin_routes.py
from fastapi import APIRouter, Depends, Request

from src.api.middleware.auth import admin_only
from src.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_only)])
svc = AdminService()


def _params(request: Request):
    return list(request.query_params.multi_items())


@router.get("/dashboard")
def dashboard():
    return {"success": True, "data": svc.dashboard()}


@router.get("/users")
def users(request: Request):
    return svc.users(_params(request)).to_page_response()


@router.get("/courses")
def courses(request: Request):
    return svc.courses(_params(request)).to_page_response()


@router.get("/enrollments")
def enrollments(request: Request):
    return svc.enrollments(_params(request)).to_page_response()


@router.get("/feedback")
def feedback(request: Request):
    return svc.feedback(_params(request)).to_page_response()


@router.put("/users/{user_id}/toggle-active")
def toggle_active(user_id: str):
    user = svc.toggle_user_active(user_id)
    state = "activated" if user.get("isActive") else "deactivated"
    return {"success": True, "message": f"User {state} successfully", "data": user}


@router.get("/stats/enrollment")
def enrollment_stats():
    return {"success": True, "data": svc.enrollment_stats()}
