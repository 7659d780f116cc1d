from typing import Any, Dict, Optional

from src.repositories.mongo_repository import MongoRepository

# never leaves the repository unless explicitly asked for
PUBLIC_PROJECTION = {"password_hash": 0}


class UserRepository(MongoRepository):
    def __init__(self):
        super().__init__("users")

    def find_by_email(self, email: str, with_password: bool = False) -> Optional[Dict[str, Any]]:
        projection = None if with_password else PUBLIC_PROJECTION
        return self.find_one_by({"email": email.lower()}, projection)

    def find_public(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return self.find_one(user_id, PUBLIC_PROJECTION)

    def find_with_password(self, user_id: Any) -> Optional[Dict[str, Any]]:
        return self.find_one(user_id)

    def add_enrolled_course(self, user_id: str, course_id: str) -> None:
        oid = self.to_object_id(user_id)
        if oid is not None:
            self.col.update_one({"_id": oid}, {"$addToSet": {"enrolledCourses": course_id}})

    def remove_enrolled_course(self, user_id: str, course_id: str) -> None:
        oid = self.to_object_id(user_id)
        if oid is not None:
            self.col.update_one({"_id": oid}, {"$pull": {"enrolledCourses": course_id}})
