# src/services/feedback_service.py
from typing import Any, Dict, List, Set
import logging

from pymongo.errors import DuplicateKeyError

from src.repositories.mongo_repository import MongoRepository
from src.repositories.user_repository import UserRepository
from src.services.course_service import CourseService
from src.services.rating_service import RatingService
from src.utils.errors import ConflictError, ForbiddenError, NotFoundError
from src.utils.query_engine import QueryResult, run_query
from src.utils.relations import populate_many


class _CourseRatedService:
    """
    Base común de feedback y reviews: filas (user, course, rating) que
    alimentan Course.rating. Toda mutación dispara RatingService.recompute.
    """

    collection = ""
    label = ""

    def __init__(self):
        self.repo = MongoRepository(self.collection)
        self.course_svc = CourseService()
        self.ratings = RatingService()
        self.relations = {
            "user": (UserRepository(), ("fullName", "email")),
            "course": (self.course_svc.repo, ("title",)),
        }

    def get(self, row_id: str) -> Dict[str, Any]:
        row = self.repo.find_one(row_id)
        if not row:
            raise NotFoundError(self.label, row_id)
        return row

    def fetch_with_relations(self, row_id: str, relations: Set[str]) -> Dict[str, Any]:
        return populate_many([self.get(row_id)], self.relations, relations)[0]

    def _owned(self, row_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
        row = self.get(row_id)
        if user.get("role") != "admin" and row.get("user") != user["_id"]:
            raise ForbiddenError(f"Not authorized to modify this {self.label.lower()}")
        return row

    def _insert(self, user_id: str, course_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        if not self.course_svc.find_active(course_id):
            raise NotFoundError("Course", course_id)
        try:
            row = self.repo.create({"user": user_id, "course": course_id, **fields})
        except DuplicateKeyError:
            raise ConflictError(f"You have already submitted {self.label.lower()} for this course")
        self.ratings.recompute(course_id)
        logging.info(f"[{self.collection}.create] user={user_id} course={course_id} rating={fields.get('rating')}")
        return row

    def update(self, row_id: str, changes: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        row = self._owned(row_id, user)
        if not changes:
            return row
        updated = self.repo.update(row_id, changes)
        self.ratings.recompute(row["course"])
        return updated

    def delete(self, row_id: str, user: Dict[str, Any]) -> None:
        row = self._owned(row_id, user)
        self.repo.delete(row_id)
        self.ratings.recompute(row["course"])
        logging.info(f"[{self.collection}.delete] {row_id}")

    def by_course(self, course_id: str) -> List[Dict[str, Any]]:
        rows = self.repo.find({"course": course_id}, sort=[("createdAt", -1)])
        return populate_many(rows, self.relations, {"user"})


class FeedbackService(_CourseRatedService):
    collection = "feedback"
    label = "Feedback"

    def list(self, params, default_limit=None) -> QueryResult:
        return run_query(
            self.repo,
            params,
            default_limit=default_limit,
            populate=lambda rows: populate_many(rows, self.relations, {"user", "course"}),
        )

    def submit(self, user_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert(
            user_id,
            payload["courseId"],
            {"rating": payload["rating"], "comment": payload["comment"]},
        )


class ReviewService(_CourseRatedService):
    collection = "reviews"
    label = "Review"

    def create(self, user_id: str, course_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._insert(user_id, course_id, dict(payload))

    def get_for_course(self, course_id: str, review_id: str) -> Dict[str, Any]:
        row = self.get(review_id)
        if row.get("course") != course_id:
            raise NotFoundError(self.label, review_id)
        return row
