# src/services/cart_service.py
from typing import Any, Dict, List
from datetime import datetime
import logging

from bson import ObjectId

from src.repositories.mongo_repository import MongoRepository
from src.services.enrollment_service import EnrollmentService
from src.utils.errors import InvalidInputError, InvalidStateError, NotFoundError
from src.utils.relations import populate

CART_COURSE_FIELDS = ("title", "price", "thumbnail", "instructor")


class CartService:
    """
    Un carrito por usuario: {user, items: [{_id, course, quantity}]}.
    Un curso aparece a lo sumo una vez; agregarlo de nuevo suma cantidad.
    """

    def __init__(self):
        self.repo = MongoRepository("carts")
        self.enrollment_svc = EnrollmentService()
        self.courses = self.enrollment_svc.course_svc

    # ===============================================================
    # 🛒 CARRITO
    # ===============================================================
    def get_or_create(self, user_id: str) -> Dict[str, Any]:
        # upsert sobre el índice único de user: idempotente
        return self.repo.update_where(
            {"user": user_id},
            {"$setOnInsert": {"items": [], "createdAt": datetime.utcnow()}},
            upsert=True,
        )

    def get_populated(self, user_id: str) -> Dict[str, Any]:
        cart = self.get_or_create(user_id)
        populate(cart["items"], "course", self.courses.repo, CART_COURSE_FIELDS)
        return cart

    def _existing(self, user_id: str) -> Dict[str, Any]:
        cart = self.repo.find_one_by({"user": user_id})
        if not cart:
            raise NotFoundError("Cart")
        return cart

    def add_item(self, user_id: str, course_id: str, quantity: int = 1) -> Dict[str, Any]:
        if quantity is None:
            quantity = 1
        if quantity < 1:
            raise InvalidInputError("Quantity must be at least 1")
        if not self.courses.find_active(course_id):
            raise NotFoundError("Course", course_id)

        self.get_or_create(user_id)
        # 1) el curso ya está: sumar cantidad
        cart = self.repo.update_where(
            {"user": user_id, "items.course": course_id},
            {"$inc": {"items.$.quantity": quantity}},
        )
        if cart:
            return cart
        # 2) línea nueva, sólo si nadie la agregó en el medio
        line = {"_id": str(ObjectId()), "course": course_id, "quantity": quantity}
        cart = self.repo.update_where(
            {"user": user_id, "items.course": {"$ne": course_id}},
            {"$push": {"items": line}},
        )
        if cart:
            return cart
        return self.repo.update_where(
            {"user": user_id, "items.course": course_id},
            {"$inc": {"items.$.quantity": quantity}},
        )

    def update_item(self, user_id: str, item_id: str, quantity: int) -> Dict[str, Any]:
        self._existing(user_id)
        if quantity <= 0:
            return self.remove_item(user_id, item_id)
        cart = self.repo.update_where(
            {"user": user_id, "items._id": item_id},
            {"$set": {"items.$.quantity": quantity}},
        )
        if not cart:
            raise NotFoundError("Cart item", item_id)
        return cart

    def remove_item(self, user_id: str, item_id: str) -> Dict[str, Any]:
        self._existing(user_id)
        cart = self.repo.update_where(
            {"user": user_id, "items._id": item_id},
            {"$pull": {"items": {"_id": item_id}}},
        )
        if not cart:
            raise NotFoundError("Cart item", item_id)
        return cart

    def clear(self, user_id: str) -> Dict[str, Any]:
        self._existing(user_id)
        return self.repo.update_where({"user": user_id}, {"$set": {"items": []}})

    # ===============================================================
    # 💳 CHECKOUT
    # ===============================================================
    def checkout(self, user_id: str) -> Dict[str, Any]:
        """
        Inscribe al usuario en cada curso del carrito (pago simulado como
        completado) y vacía el carrito. Los cursos ya inscriptos se saltean.
        """
        cart = self.repo.find_one_by({"user": user_id})
        if not cart or not cart.get("items"):
            raise InvalidStateError("Cart is empty")

        items: List[Dict[str, Any]] = cart["items"]
        # validar todo antes de escribir nada
        for item in items:
            if not self.courses.find_active(item["course"]):
                raise NotFoundError("Course", item["course"])

        enrolled, skipped = [], []
        for item in items:
            enrollment, created = self.enrollment_svc.create_enrollment(
                user_id, item["course"], payment_status="completed", skip_existing=True
            )
            if created:
                enrolled.append(enrollment)
            else:
                skipped.append(item["course"])

        # sólo salen las líneas inscriptas: lo agregado durante el checkout queda
        cart = self.repo.update_where(
            {"user": user_id},
            {"$pull": {"items": {"_id": {"$in": [i["_id"] for i in items]}}}},
        )
        logging.info(f"[cart.checkout] user={user_id} enrolled={len(enrolled)} skipped={len(skipped)}")
        return {"cart": cart, "enrollments": enrolled, "skipped": skipped}

    def get_total(self, user_id: str) -> Dict[str, Any]:
        cart = self.repo.find_one_by({"user": user_id})
        if not cart:
            return {"total": 0, "itemCount": 0}

        prices = self.courses.repo.find_by_ids([i["course"] for i in cart["items"]], {"price": 1})
        total, item_count = 0, 0
        for item in cart["items"]:
            course = prices.get(item["course"])
            if course:
                total += course.get("price", 0) * item["quantity"]
            item_count += item["quantity"]
        return {"total": total, "itemCount": item_count}
