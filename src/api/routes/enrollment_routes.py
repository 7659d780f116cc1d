# enrollment_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.api.middleware.auth import admin_only, protect
from src.api.routes.course_routes import wanted_relations
from src.models.enrollment_model import EnrollIn, EnrollmentUpdate, ProgressIn
from src.services.enrollment_service import EnrollmentService

router = APIRouter(prefix="/enrollments", tags=["enrollments"])
svc = EnrollmentService()


@router.get("/my-enrollments")
def my_enrollments(user: dict = Depends(protect)):
    items = svc.my_enrollments(user["_id"])
    return {"success": True, "count": len(items), "data": items}


@router.post("", status_code=201)
def enroll(payload: EnrollIn, user: dict = Depends(protect)):
    return {"success": True, "data": svc.enroll(user, payload.courseId)}


@router.get("", dependencies=[Depends(admin_only)])
def list_enrollments(request: Request):
    return svc.list_all(list(request.query_params.multi_items())).to_response()


@router.get("/{enrollment_id}", dependencies=[Depends(admin_only)])
def get_enrollment(enrollment_id: str, populate: Optional[str] = Query("user,course")):
    return {"success": True, "data": svc.fetch_with_relations(enrollment_id, wanted_relations(populate))}


@router.put("/{enrollment_id}")
def update_enrollment(enrollment_id: str, payload: EnrollmentUpdate, user: dict = Depends(admin_only)):
    return {"success": True, "data": svc.update(enrollment_id, payload.changes(), user)}


@router.delete("/{enrollment_id}")
def delete_enrollment(enrollment_id: str, user: dict = Depends(protect)):
    svc.delete(enrollment_id, user)
    return {"success": True, "data": {}}


@router.put("/{enrollment_id}/progress")
def update_progress(enrollment_id: str, payload: ProgressIn, user: dict = Depends(protect)):
    enrollment = svc.record_lesson_completion(enrollment_id, user["_id"], payload.moduleId, payload.lessonId)
    return {"success": True, "data": enrollment}
