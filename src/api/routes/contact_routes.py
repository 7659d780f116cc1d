# contact_routes.py
from fastapi import APIRouter, Depends, Request

from src.api.middleware.auth import admin_only
from src.models.contact_model import ContactIn, ContactUpdate
from src.services.contact_service import ContactService

router = APIRouter(prefix="/contacts", tags=["contacts"])
svc = ContactService()


@router.post("", status_code=201)
def submit_contact(payload: ContactIn):
    contact = svc.submit(payload.model_dump())
    return {"success": True, "message": "Your message has been sent", "data": contact}


@router.get("", dependencies=[Depends(admin_only)])
def list_contacts(request: Request):
    return svc.list(list(request.query_params.multi_items())).to_response()


@router.get("/unread/count", dependencies=[Depends(admin_only)])
def unread_count():
    return {"success": True, "data": {"count": svc.unread_count()}}


@router.get("/{contact_id}", dependencies=[Depends(admin_only)])
def get_contact(contact_id: str):
    return {"success": True, "data": svc.get(contact_id)}


@router.put("/{contact_id}", dependencies=[Depends(admin_only)])
def mark_contact(contact_id: str, payload: ContactUpdate):
    return {"success": True, "data": svc.mark_read(contact_id, payload.isRead)}


@router.delete("/{contact_id}", dependencies=[Depends(admin_only)])
def delete_contact(contact_id: str):
    svc.delete(contact_id)
    return {"success": True, "data": {}}
