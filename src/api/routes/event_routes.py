# event_routes.py
from fastapi import APIRouter, Depends, Request

from src.api.middleware.auth import admin_only, protect
from src.models.event_model import EventIn, EventUpdate
from src.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])
svc = EventService()


@router.get("")
def list_events(request: Request):
    return svc.list(list(request.query_params.multi_items())).to_response()


# antes de /{event_id} para que "my-events" no se tome como id
@router.get("/my-events")
def my_events(user: dict = Depends(protect)):
    items = svc.my_events(user["_id"])
    return {"success": True, "count": len(items), "data": items}


@router.get("/{event_id}")
def get_event(event_id: str):
    return {"success": True, "data": svc.get(event_id)}


@router.post("", status_code=201, dependencies=[Depends(admin_only)])
def create_event(payload: EventIn):
    return {"success": True, "data": svc.create(payload.model_dump())}


@router.put("/{event_id}", dependencies=[Depends(admin_only)])
def update_event(event_id: str, payload: EventUpdate):
    return {"success": True, "data": svc.update(event_id, payload.changes())}


@router.delete("/{event_id}", dependencies=[Depends(admin_only)])
def delete_event(event_id: str):
    svc.delete(event_id)
    return {"success": True, "data": {}}


@router.post("/{event_id}/register")
def register(event_id: str, user: dict = Depends(protect)):
    return {"success": True, "data": svc.register(event_id, user["_id"])}
