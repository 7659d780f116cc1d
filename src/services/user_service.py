# src/services/user_service.py
from typing import Any, Dict, List, Optional
import logging

from pymongo.errors import DuplicateKeyError

from src.repositories.mongo_repository import MongoRepository
from src.repositories.session_repository import SessionRepository
from src.repositories.user_repository import UserRepository
from src.utils.errors import ConflictError, InvalidInputError, NotFoundError, UnauthorizedError
from src.utils.query_engine import QueryResult, run_query
from src.utils.security import hash_password, verify_password


class UserService:
    def __init__(self):
        self.user_repo = UserRepository()
        self.sessions = SessionRepository()
        self.courses = MongoRepository("courses")

    # ===============================================================
    # 🔐 AUTH
    # ===============================================================
    def register(self, payload: Dict[str, Any], role: str = "student") -> Dict[str, Any]:
        logging.info(f"🟦 Intentando registrar usuario: {payload['email']}")
        doc = {
            "fullName": payload["fullName"],
            "email": payload["email"].lower(),
            "phone": payload["phone"],
            "password_hash": hash_password(payload["password"]),
            "role": role,
            "photo": "",
            "address": {},
            "enrolledCourses": [],
            "wishlist": [],
            "isActive": True,
            "isVerified": False,
        }
        try:
            created = self.user_repo.create(doc)
        except DuplicateKeyError:
            logging.warning(f"⚠️ Email ya registrado: {doc['email']}")
            raise ConflictError("Email is already registered")
        created.pop("password_hash", None)
        logging.info(f"✅ Usuario creado con _id={created['_id']}")
        return created

    def login(self, email: str, password: str) -> Dict[str, Any]:
        user = self.user_repo.find_by_email(email, with_password=True)
        if not user or not verify_password(password, user.get("password_hash", "")):
            raise UnauthorizedError("Invalid credentials")
        if not user.get("isActive", True):
            raise UnauthorizedError("Account is disabled")

        token = self.sessions.create(user["_id"])
        user.pop("password_hash", None)
        return {"token": token, "user": user}

    def logout(self, token: Optional[str]) -> None:
        if token:
            self.sessions.delete(token)

    def update_password(self, user_id: str, current: str, new: str) -> None:
        user = self.user_repo.find_with_password(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        if not verify_password(current, user.get("password_hash", "")):
            raise UnauthorizedError("Password is incorrect")
        self.user_repo.update(user_id, {"password_hash": hash_password(new)})

    # ===============================================================
    # 👤 PERFIL
    # ===============================================================
    def get_profile(self, user_id: str) -> Dict[str, Any]:
        user = self.user_repo.find_public(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = dict(changes)
        if "email" in changes and changes["email"]:
            changes["email"] = changes["email"].lower()
        if not changes:
            return self.get_profile(user_id)
        try:
            updated = self.user_repo.update(user_id, changes)
        except DuplicateKeyError:
            raise ConflictError("Email is already registered")
        if not updated:
            raise NotFoundError("User", user_id)
        updated.pop("password_hash", None)
        return updated

    # ===============================================================
    # ⭐ WISHLIST
    # ===============================================================
    def wishlist(self, user_id: str) -> List[Dict[str, Any]]:
        user = self.get_profile(user_id)
        found = self.courses.find_by_ids(user.get("wishlist") or [], {"title": 1, "price": 1, "thumbnail": 1, "isDeleted": 1})
        return [c for c in (found.get(cid) for cid in user.get("wishlist") or []) if c and not c.get("isDeleted")]

    def add_to_wishlist(self, user_id: str, course_id: str) -> List[str]:
        course = self.courses.find_one(course_id)
        if not course or course.get("isDeleted"):
            raise NotFoundError("Course", course_id)
        user = self.user_repo.update_where(
            {"_id": self.user_repo.to_object_id(user_id)},
            {"$addToSet": {"wishlist": course_id}},
        )
        if not user:
            raise NotFoundError("User", user_id)
        return user["wishlist"]

    def remove_from_wishlist(self, user_id: str, course_id: str) -> List[str]:
        user = self.user_repo.update_where(
            {"_id": self.user_repo.to_object_id(user_id)},
            {"$pull": {"wishlist": course_id}},
        )
        if not user:
            raise NotFoundError("User", user_id)
        return user["wishlist"]

    # ===============================================================
    # 🛠️ ADMIN
    # ===============================================================
    def list(self, params, default_limit: Optional[int] = None) -> QueryResult:
        result = run_query(self.user_repo, params, default_limit=default_limit)
        for u in result.items:
            u.pop("password_hash", None)
        return result

    def admin_update(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        if "role" in changes and changes["role"] is None:
            raise InvalidInputError("Role cannot be empty")
        return self.update_profile(user_id, changes)

    def delete(self, user_id: str) -> None:
        # borrado físico (sólo admin)
        if not self.user_repo.delete(user_id):
            raise NotFoundError("User", user_id)
        logging.info(f"[users.delete] {user_id}")

    def toggle_active(self, user_id: str) -> Dict[str, Any]:
        user = self.get_profile(user_id)
        updated = self.user_repo.update(user_id, {"isActive": not user.get("isActive", True)})
        updated.pop("password_hash", None)
        return updated
