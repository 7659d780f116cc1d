# src/services/enrollment_service.py
from typing import Any, Dict, List, Optional, Set, Tuple
from datetime import datetime
import logging

from pymongo.errors import DuplicateKeyError, PyMongoError

from src.repositories.mongo_repository import MongoRepository
from src.repositories.user_repository import UserRepository
from src.services.course_service import CourseService
from src.utils.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError, ServerFaultError
from src.utils.query_engine import QueryResult, run_query
from src.utils.relations import populate_many

COURSE_SUMMARY = ("title", "category", "price", "thumbnail", "instructor", "rating")


def progress_percentage(completed: int, total: int) -> int:
    """round-half-up(100 * completed / total) acotado a [0, 100]; 0 si el curso no tiene lecciones."""
    if total <= 0:
        return 0
    pct = int(100 * completed / total + 0.5)
    return max(0, min(100, pct))


class EnrollmentService:
    def __init__(self):
        self.repo = MongoRepository("enrollments")
        self.users = UserRepository()
        self.course_svc = CourseService()
        self.relations = {
            "user": (self.users, ("fullName", "email")),
            "course": (self.course_svc.repo, ("title", "price")),
        }

    @staticmethod
    def _check_owner(enrollment: Dict[str, Any], user: Dict[str, Any]) -> None:
        if user.get("role") != "admin" and enrollment.get("user") != user["_id"]:
            raise ForbiddenError("Not authorized to modify this enrollment")

    # -------------------- alta --------------------
    def create_enrollment(
        self,
        user_id: str,
        course_id: str,
        payment_status: str = "pending",
        skip_existing: bool = False,
    ) -> Tuple[Optional[Dict[str, Any]], bool]:
        """
        Único camino de alta de enrollments (enroll directo y checkout).
        La unicidad (user, course) la garantiza el índice único, no una lectura previa.
        Devuelve (enrollment, creado).
        """
        payload = {
            "user": user_id,
            "course": course_id,
            "enrollmentDate": datetime.utcnow(),
            "paymentStatus": payment_status,
            "progress": 0,
            "completedLessons": [],
            "certificateIssued": False,
            "completedAt": None,
        }
        try:
            created = self.repo.create(payload)
        except DuplicateKeyError:
            if skip_existing:
                return None, False
            raise ConflictError("User is already enrolled in this course")

        try:
            self.users.add_enrolled_course(user_id, course_id)
            self.course_svc.sync_student_count(course_id)
        except PyMongoError as e:
            # derived state could not be written: undo the enrollment
            logging.error(f"[enrollments.create] rollback {created['_id']}: {e}")
            self.repo.delete(created["_id"])
            self.users.remove_enrolled_course(user_id, course_id)
            raise ServerFaultError("Could not complete enrollment")

        logging.info(f"[enrollments.create] user={user_id} course={course_id} status={payment_status}")
        return created, True

    def enroll(self, user: Dict[str, Any], course_id: str) -> Dict[str, Any]:
        if not self.course_svc.find_active(course_id):
            raise NotFoundError("Course", course_id)
        enrollment, _ = self.create_enrollment(user["_id"], course_id)
        return enrollment

    # -------------------- lecturas --------------------
    def my_enrollments(self, user_id: str) -> List[Dict[str, Any]]:
        items = self.repo.find({"user": user_id}, sort=[("createdAt", -1)])
        relations = {"course": (self.course_svc.repo, COURSE_SUMMARY)}
        return populate_many(items, relations, {"course"})

    def list_all(self, params, default_limit: Optional[int] = None) -> QueryResult:
        return run_query(
            self.repo,
            params,
            default_limit=default_limit,
            populate=lambda items: populate_many(items, self.relations, {"user", "course"}),
        )

    def get(self, enrollment_id: str) -> Dict[str, Any]:
        enrollment = self.repo.find_one(enrollment_id)
        if not enrollment:
            raise NotFoundError("Enrollment", enrollment_id)
        return enrollment

    def fetch_with_relations(self, enrollment_id: str, relations: Set[str]) -> Dict[str, Any]:
        enrollment = self.get(enrollment_id)
        return populate_many([enrollment], self.relations, relations)[0]

    # -------------------- cambios --------------------
    def update(self, enrollment_id: str, changes: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
        enrollment = self.get(enrollment_id)
        self._check_owner(enrollment, user)
        if not changes:
            return enrollment
        updated = self.repo.update(enrollment_id, changes)
        if "paymentStatus" in changes:
            self.course_svc.sync_student_count(enrollment["course"])
        return updated

    def delete(self, enrollment_id: str, user: Dict[str, Any]) -> None:
        enrollment = self.get(enrollment_id)
        self._check_owner(enrollment, user)
        self.repo.delete(enrollment_id)
        self.users.remove_enrolled_course(enrollment["user"], enrollment["course"])
        self.course_svc.sync_student_count(enrollment["course"])
        logging.info(f"[enrollments.delete] {enrollment_id} user={enrollment['user']}")

    # -------------------- progreso --------------------
    def record_lesson_completion(self, enrollment_id: str, user_id: str, module_id: str, lesson_id: str) -> Dict[str, Any]:
        """
        Marca una lección como completada y recalcula el progreso.
        Sólo el dueño del enrollment puede hacerlo.
        """
        oid = self.repo.to_object_id(enrollment_id)
        enrollment = self.repo.find_one_by({"_id": oid, "user": user_id}) if oid else None
        if not enrollment:
            raise NotFoundError("Enrollment")

        course = self.course_svc.repo.find_one(enrollment["course"])
        if not course:
            raise NotFoundError("Course", enrollment["course"])
        if (module_id, lesson_id) not in self.course_svc.lesson_pairs(course):
            raise InvalidInputError("Lesson does not belong to this course curriculum")

        # $addToSet: marcar dos veces la misma lección no duplica
        enrollment = self.repo.update_where(
            {"_id": oid, "user": user_id},
            {"$addToSet": {"completedLessons": {"moduleId": module_id, "lessonId": lesson_id}}},
        )
        if not enrollment:
            raise NotFoundError("Enrollment")

        valid = self.course_svc.lesson_pairs(course)
        done = {
            (l.get("moduleId"), l.get("lessonId"))
            for l in enrollment.get("completedLessons") or []
        } & valid
        progress = progress_percentage(len(done), self.course_svc.total_lessons(course))
        # $max: una escritura concurrente con un valor viejo nunca baja el progreso
        enrollment = self.repo.update_where({"_id": oid}, {"$max": {"progress": progress}})

        if enrollment["progress"] == 100:
            # completedAt se setea una sola vez (escritura condicional)
            stamped = self.repo.update_where(
                {"_id": oid, "completedAt": None},
                {"$set": {"completedAt": datetime.utcnow()}},
            )
            if stamped:
                enrollment = stamped
                logging.info(f"[enrollments.progress] {enrollment_id} completado")
        return enrollment
