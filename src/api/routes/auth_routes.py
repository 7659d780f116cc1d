# auth_routes.py
from fastapi import APIRouter, Depends, Request
import logging

from src.api.middleware.auth import protect
from src.models.user_model import PasswordUpdate, UserDetailsUpdate, UserLogin, UserRegister
from src.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])
svc = UserService()


@router.post("/register", status_code=201)
def register(payload: UserRegister):
    # el rol no se elige: todo auto-registro es student
    user = svc.register(payload.model_dump())
    return {"success": True, "data": user}


@router.post("/login")
def login(payload: UserLogin):
    """
    Login con credenciales: { "email": "..", "password": ".." }
    Devuelve un token de sesión guardado en Redis.
    """
    out = svc.login(payload.email, payload.password)
    logging.info(f"[auth.login] user={out['user']['_id']}")
    return {
        "success": True,
        "token": out["token"],
        "auth_header": f"Bearer {out['token']}",
        "data": out["user"],
    }


@router.get("/logout")
def logout(request: Request):
    svc.logout(getattr(request.state, "token", None))
    return {"success": True, "data": {}}


@router.get("/me")
def me(user: dict = Depends(protect)):
    return {"success": True, "data": user}


@router.put("/updatedetails")
def update_details(payload: UserDetailsUpdate, user: dict = Depends(protect)):
    return {"success": True, "data": svc.update_profile(user["_id"], payload.changes())}


@router.put("/updatepassword")
def update_password(payload: PasswordUpdate, request: Request, user: dict = Depends(protect)):
    svc.update_password(user["_id"], payload.currentPassword, payload.newPassword)
    # las demás sesiones siguen vivas hasta su TTL; se emite un token nuevo
    svc.logout(getattr(request.state, "token", None))
    token = svc.sessions.create(user["_id"])
    return {"success": True, "token": token, "data": svc.get_profile(user["_id"])}
