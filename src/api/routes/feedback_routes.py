# feedback_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.api.middleware.auth import protect
from src.api.routes.course_routes import wanted_relations
from src.models.feedback_model import FeedbackIn, FeedbackUpdate
from src.services.feedback_service import FeedbackService

router = APIRouter(prefix="/feedback", tags=["feedback"])
svc = FeedbackService()


@router.get("")
def list_feedback(request: Request):
    return svc.list(list(request.query_params.multi_items())).to_response()


@router.get("/course/{course_id}")
def feedback_by_course(course_id: str):
    items = svc.by_course(course_id)
    return {"success": True, "count": len(items), "data": items}


@router.get("/{feedback_id}")
def get_feedback(feedback_id: str, populate: Optional[str] = Query("user,course")):
    return {"success": True, "data": svc.fetch_with_relations(feedback_id, wanted_relations(populate))}


@router.post("", status_code=201)
def submit_feedback(payload: FeedbackIn, user: dict = Depends(protect)):
    return {"success": True, "data": svc.submit(user["_id"], payload.model_dump())}


@router.put("/{feedback_id}")
def update_feedback(feedback_id: str, payload: FeedbackUpdate, user: dict = Depends(protect)):
    return {"success": True, "data": svc.update(feedback_id, payload.changes(), user)}


@router.delete("/{feedback_id}")
def delete_feedback(feedback_id: str, user: dict = Depends(protect)):
    svc.delete(feedback_id, user)
    return {"success": True, "data": {}}
