# src/services/course_service.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
import logging

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from src.repositories.mongo_repository import MongoRepository
from src.repositories.user_repository import UserRepository
from src.utils.errors import ConflictError, ForbiddenError, NotFoundError
from src.utils.query_engine import QueryResult, run_query
from src.utils.relations import populate_many

NOT_DELETED = {"isDeleted": False}
DERIVED_DEFAULTS = {"rating": 0, "numberOfReviews": 0, "totalStudentsEnrolled": 0}
SYNC_ATTEMPTS = 5


class CourseService:
    def __init__(self) -> None:
        self.repo = MongoRepository("courses")
        self.enrollments = MongoRepository("enrollments")
        self.users = UserRepository()
        self.relations = {"createdBy": (self.users, ("fullName", "email"))}

    # -------------------- helpers internos --------------------
    @staticmethod
    def _with_ids(curriculum: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Asigna _id a módulos y lecciones que no lo traen (se preservan los existentes)."""
        out = []
        for module in curriculum or []:
            module = dict(module)
            module["_id"] = module.get("_id") or str(ObjectId())
            lessons = []
            for lesson in module.get("lessons") or []:
                lesson = dict(lesson)
                lesson["_id"] = lesson.get("_id") or str(ObjectId())
                lessons.append(lesson)
            module["lessons"] = lessons
            out.append(module)
        return out

    @staticmethod
    def lesson_pairs(course: Dict[str, Any]) -> Set[Tuple[str, str]]:
        return {
            (str(m.get("_id")), str(l.get("_id")))
            for m in course.get("courseCurriculum") or []
            for l in m.get("lessons") or []
        }

    @staticmethod
    def total_lessons(course: Dict[str, Any]) -> int:
        return sum(len(m.get("lessons") or []) for m in course.get("courseCurriculum") or [])

    @staticmethod
    def _check_owner(course: Dict[str, Any], user: Dict[str, Any]) -> None:
        if user.get("role") != "admin" and course.get("createdBy") != user["_id"]:
            raise ForbiddenError(f"User {user['_id']} is not authorized to modify this course")

    # -------------------- lecturas --------------------
    def list(self, params) -> QueryResult:
        return run_query(self.repo, params, base_filter=NOT_DELETED)

    def find_active(self, course_id: str) -> Optional[Dict[str, Any]]:
        course = self.repo.find_one(course_id)
        if not course or course.get("isDeleted"):
            return None
        return course

    def get(self, course_id: str) -> Dict[str, Any]:
        course = self.find_active(course_id)
        if not course:
            raise NotFoundError("Course", course_id)
        return course

    def fetch_with_relations(self, course_id: str, relations: Set[str]) -> Dict[str, Any]:
        course = self.get(course_id)
        return populate_many([course], self.relations, relations)[0]

    def top_rated(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self.repo.find(NOT_DELETED, sort=[("rating", -1)], limit=limit)

    def popular(self, limit: int = 5) -> List[Dict[str, Any]]:
        return self.repo.find(NOT_DELETED, sort=[("totalStudentsEnrolled", -1)], limit=limit)

    def by_instructor(self, instructor: str) -> List[Dict[str, Any]]:
        query = {"$and": [NOT_DELETED, {"$or": [{"createdBy": instructor}, {"instructor": instructor}]}]}
        return self.repo.find(query, sort=[("createdAt", -1)])

    # -------------------- CRUD --------------------
    def create(self, payload: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        course = dict(payload)
        course["courseCurriculum"] = self._with_ids(course.get("courseCurriculum"))
        course.update(DERIVED_DEFAULTS)
        course["isDeleted"] = False
        course["createdBy"] = user["_id"]
        try:
            created = self.repo.create(course)
        except DuplicateKeyError:
            raise ConflictError(f"A course titled '{course['title']}' already exists")
        logging.info(f"[courses.create] {created['_id']} '{created['title']}'")
        return created

    def update(self, course_id: str, updates: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        course = self.get(course_id)
        self._check_owner(course, user)

        updates = dict(updates)
        if "courseCurriculum" in updates:
            updates["courseCurriculum"] = self._with_ids(updates["courseCurriculum"])
        if not updates:
            return course
        try:
            return self.repo.update(course_id, updates)
        except DuplicateKeyError:
            raise ConflictError(f"A course titled '{updates.get('title')}' already exists")

    def delete(self, course_id: str, user: Dict[str, Any]) -> None:
        course = self.get(course_id)
        self._check_owner(course, user)
        # borrado lógico
        self.repo.update(course_id, {"isDeleted": True})
        logging.info(f"[courses.delete] {course_id} marcado como eliminado")

    # -------------------- contadores derivados --------------------
    def sync_student_count(self, course_id: str) -> int:
        """
        totalStudentsEnrolled = enrollments completados de ese curso.
        Cada escritor vuelve a contar después de escribir y reintenta si el valor
        quedó viejo, así la última escritura siempre es un conteo vigente.
        """
        query = {"course": course_id, "paymentStatus": "completed"}
        count = self.enrollments.count(query)
        for _ in range(SYNC_ATTEMPTS):
            self.repo.update(course_id, {"totalStudentsEnrolled": count})
            fresh = self.enrollments.count(query)
            if fresh == count:
                return count
            count = fresh
        logging.warning(f"[courses.sync_student_count] {course_id} sin converger tras {SYNC_ATTEMPTS} intentos")
        self.repo.update(course_id, {"totalStudentsEnrolled": count})
        return count
