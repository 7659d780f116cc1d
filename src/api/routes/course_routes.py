# course_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.api.middleware.auth import admin_only, protect
from src.models.course_model import CourseIn, CourseUpdate
from src.models.feedback_model import ReviewIn, ReviewUpdate
from src.services.course_service import CourseService
from src.services.feedback_service import ReviewService

router = APIRouter(prefix="/courses", tags=["courses"])
svc = CourseService()
reviews = ReviewService()


def wanted_relations(populate: Optional[str]) -> set:
    """?populate=createdBy,user -> {"createdBy", "user"}"""
    return {p.strip() for p in (populate or "").split(",") if p.strip()}


# ===============================================================
# 📋 LISTADOS
# ===============================================================
@router.get("")
def list_courses(request: Request):
    return svc.list(list(request.query_params.multi_items())).to_response()


@router.get("/top")
def top_rated():
    items = svc.top_rated()
    return {"success": True, "count": len(items), "data": items}


@router.get("/popular")
def popular():
    items = svc.popular()
    return {"success": True, "count": len(items), "data": items}


@router.get("/{instructor_id}/courses")
def by_instructor(instructor_id: str):
    items = svc.by_instructor(instructor_id)
    return {"success": True, "count": len(items), "data": items}


@router.get("/{course_id}")
def get_course(course_id: str, populate: Optional[str] = Query(None)):
    return {"success": True, "data": svc.fetch_with_relations(course_id, wanted_relations(populate))}


# ===============================================================
# 🏗️ CRUD (admin)
# ===============================================================
@router.post("", status_code=201)
def create_course(payload: CourseIn, user: dict = Depends(admin_only)):
    return {"success": True, "data": svc.create(payload.model_dump(by_alias=True), user)}


@router.put("/{course_id}")
def update_course(course_id: str, payload: CourseUpdate, user: dict = Depends(admin_only)):
    return {"success": True, "data": svc.update(course_id, payload.changes(), user)}


@router.delete("/{course_id}")
def delete_course(course_id: str, user: dict = Depends(admin_only)):
    svc.delete(course_id, user)
    return {"success": True, "data": {}}


# ===============================================================
# ⭐ REVIEWS
# ===============================================================
@router.get("/{course_id}/reviews")
def list_reviews(course_id: str):
    svc.get(course_id)
    items = reviews.by_course(course_id)
    return {"success": True, "count": len(items), "data": items}


@router.post("/{course_id}/reviews", status_code=201)
def add_review(course_id: str, payload: ReviewIn, user: dict = Depends(protect)):
    return {"success": True, "data": reviews.create(user["_id"], course_id, payload.model_dump())}


@router.get("/{course_id}/reviews/{review_id}")
def get_review(course_id: str, review_id: str):
    return {"success": True, "data": reviews.get_for_course(course_id, review_id)}


@router.put("/{course_id}/reviews/{review_id}")
def update_review(course_id: str, review_id: str, payload: ReviewUpdate, user: dict = Depends(protect)):
    reviews.get_for_course(course_id, review_id)
    return {"success": True, "data": reviews.update(review_id, payload.changes(), user)}


@router.delete("/{course_id}/reviews/{review_id}")
def delete_review(course_id: str, review_id: str, user: dict = Depends(protect)):
    reviews.get_for_course(course_id, review_id)
    reviews.delete(review_id, user)
    return {"success": True, "data": {}}
