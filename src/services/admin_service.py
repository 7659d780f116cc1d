# src/services/admin_service.py
from datetime import datetime, timedelta
from typing import Any, Dict, List

from src.config import settings
from src.repositories.mongo_repository import MongoRepository
from src.services.course_service import NOT_DELETED, CourseService
from src.services.enrollment_service import EnrollmentService
from src.services.feedback_service import FeedbackService
from src.services.user_service import UserService
from src.utils.query_engine import QueryResult, run_query

TOP_COURSE_FIELDS = {"title": 1, "category": 1, "totalStudentsEnrolled": 1, "price": 1, "rating": 1}


class AdminService:
    def __init__(self):
        self.user_svc = UserService()
        self.course_svc = CourseService()
        self.enrollment_svc = EnrollmentService()
        self.feedback_svc = FeedbackService()
        self.contacts = MongoRepository("contacts")

    # ===============================================================
    # 📊 DASHBOARD
    # ===============================================================
    def total_revenue(self) -> float:
        """Suma del precio del curso de cada enrollment con pago completado."""
        completed = self.enrollment_svc.repo.find({"paymentStatus": "completed"}, {"course": 1})
        prices = self.course_svc.repo.find_by_ids({e["course"] for e in completed}, {"price": 1})
        return sum(prices.get(e["course"], {}).get("price", 0) for e in completed)

    def dashboard(self) -> Dict[str, Any]:
        since = datetime.utcnow() - timedelta(days=7)
        users = self.user_svc.user_repo
        enrollments = self.enrollment_svc.repo
        return {
            "totalUsers": users.count(),
            "totalCourses": self.course_svc.repo.count(NOT_DELETED),
            "totalEnrollments": enrollments.count(),
            "totalFeedback": self.feedback_svc.repo.count(),
            "totalContacts": self.contacts.count(),
            "recentSignups": users.count({"createdAt": {"$gte": since}}),
            "recentEnrollments": enrollments.count({"createdAt": {"$gte": since}}),
            "totalRevenue": self.total_revenue(),
            "topCourses": self.course_svc.repo.find(
                NOT_DELETED, TOP_COURSE_FIELDS, sort=[("totalStudentsEnrolled", -1)], limit=5
            ),
        }

    def enrollment_stats(self) -> Dict[str, Any]:
        completed_flag = {"$cond": [{"$eq": ["$paymentStatus", "completed"]}, 1, 0]}
        monthly = self.enrollment_svc.repo.aggregate([
            {"$group": {
                "_id": {"year": {"$year": "$createdAt"}, "month": {"$month": "$createdAt"}},
                "count": {"$sum": 1},
                "completed": {"$sum": completed_flag},
            }},
            {"$sort": {"_id.year": 1, "_id.month": 1}},
        ])
        by_course: List[Dict[str, Any]] = self.enrollment_svc.repo.aggregate([
            {"$group": {"_id": "$course", "count": {"$sum": 1}, "completed": {"$sum": completed_flag}}},
            {"$sort": {"count": -1}},
            {"$limit": 10},
        ])
        titles = self.course_svc.repo.find_by_ids([row["_id"] for row in by_course], {"title": 1})
        by_course = [
            {
                "_id": {"courseId": row["_id"], "courseTitle": titles.get(row["_id"], {}).get("title")},
                "count": row["count"],
                "completed": row["completed"],
            }
            for row in by_course
        ]
        return {"monthlyStats": monthly, "byCourse": by_course}

    # ===============================================================
    # 📋 LISTADOS PAGINADOS
    # ===============================================================
    def users(self, params) -> QueryResult:
        return self.user_svc.list(params, default_limit=settings.ADMIN_PAGE_LIMIT)

    def courses(self, params) -> QueryResult:
        return run_query(
            self.course_svc.repo, params, base_filter=NOT_DELETED, default_limit=settings.ADMIN_PAGE_LIMIT
        )

    def enrollments(self, params) -> QueryResult:
        return self.enrollment_svc.list_all(params, default_limit=settings.ADMIN_PAGE_LIMIT)

    def feedback(self, params) -> QueryResult:
        return self.feedback_svc.list(params, default_limit=settings.ADMIN_PAGE_LIMIT)

    def toggle_user_active(self, user_id: str) -> Dict[str, Any]:
        return self.user_svc.toggle_active(user_id)
