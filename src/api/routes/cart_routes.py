# cart_routes.py
from fastapi import APIRouter, Depends

from src.api.middleware.auth import protect
from src.models.cart_model import CartItemIn, CartItemUpdate
from src.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])
svc = CartService()


@router.get("")
def get_cart(user: dict = Depends(protect)):
    return {"success": True, "data": svc.get_populated(user["_id"])}


@router.post("")
def add_to_cart(payload: CartItemIn, user: dict = Depends(protect)):
    return {"success": True, "data": svc.add_item(user["_id"], payload.courseId, payload.quantity)}


@router.delete("")
def clear_cart(user: dict = Depends(protect)):
    return {"success": True, "data": svc.clear(user["_id"])}


@router.get("/total")
def cart_total(user: dict = Depends(protect)):
    return {"success": True, "data": svc.get_total(user["_id"])}


@router.post("/checkout")
def checkout(user: dict = Depends(protect)):
    out = svc.checkout(user["_id"])
    return {
        "success": True,
        "message": f"Enrolled in {len(out['enrollments'])} course(s)",
        "data": out,
    }


@router.put("/{item_id}")
def update_item(item_id: str, payload: CartItemUpdate, user: dict = Depends(protect)):
    return {"success": True, "data": svc.update_item(user["_id"], item_id, payload.quantity)}


@router.delete("/{item_id}")
def remove_item(item_id: str, user: dict = Depends(protect)):
    return {"success": True, "data": svc.remove_item(user["_id"], item_id)}
