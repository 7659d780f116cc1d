# user_routes.py
from fastapi import APIRouter, Depends, Request

from src.api.middleware.auth import admin_only, protect
from src.models.user_model import AdminUserUpdate, UserDetailsUpdate
from src.services.course_service import CourseService
from src.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])
svc = UserService()
course_svc = CourseService()


# ===============================================================
# 👤 PERFIL
# ===============================================================
@router.get("/profile")
def get_profile(user: dict = Depends(protect)):
    return {"success": True, "data": svc.get_profile(user["_id"])}


@router.put("/profile")
def update_profile(payload: UserDetailsUpdate, user: dict = Depends(protect)):
    return {"success": True, "data": svc.update_profile(user["_id"], payload.changes())}


# ===============================================================
# ⭐ WISHLIST
# ===============================================================
@router.get("/wishlist")
def get_wishlist(user: dict = Depends(protect)):
    items = svc.wishlist(user["_id"])
    return {"success": True, "count": len(items), "data": items}


@router.post("/wishlist/{course_id}")
def add_to_wishlist(course_id: str, user: dict = Depends(protect)):
    return {"success": True, "data": svc.add_to_wishlist(user["_id"], course_id)}


@router.delete("/wishlist/{course_id}")
def remove_from_wishlist(course_id: str, user: dict = Depends(protect)):
    return {"success": True, "data": svc.remove_from_wishlist(user["_id"], course_id)}


# cursos creados por un usuario (equivale a /courses/{id}/courses)
@router.get("/{user_id}/courses")
def courses_by_user(user_id: str):
    items = course_svc.by_instructor(user_id)
    return {"success": True, "count": len(items), "data": items}


# ===============================================================
# 🛠️ ADMIN
# ===============================================================
@router.get("", dependencies=[Depends(admin_only)])
def list_users(request: Request):
    return svc.list(list(request.query_params.multi_items())).to_response()


@router.get("/{user_id}", dependencies=[Depends(admin_only)])
def get_user(user_id: str):
    return {"success": True, "data": svc.get_profile(user_id)}


@router.put("/{user_id}", dependencies=[Depends(admin_only)])
def update_user(user_id: str, payload: AdminUserUpdate):
    return {"success": True, "data": svc.admin_update(user_id, payload.changes())}


@router.delete("/{user_id}", dependencies=[Depends(admin_only)])
def delete_user(user_id: str):
    svc.delete(user_id)
    return {"success": True, "data": {}}
