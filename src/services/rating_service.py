# src/services/rating_service.py
import logging
from typing import Any, Dict, Tuple

from src.repositories.mongo_repository import MongoRepository


class RatingService:
    """
    Course.rating / Course.numberOfReviews are a projection of the feedback and
    review rows of that course. They are always re-derived from scratch, never
    patched incrementally, so concurrent recomputes converge.
    """

    SOURCES = ("feedback", "reviews")

    def __init__(self) -> None:
        self.courses = MongoRepository("courses")
        self.sources = [MongoRepository(name) for name in self.SOURCES]

    def _aggregate(self, repo: MongoRepository, course_id: str) -> Tuple[float, int]:
        rows = repo.aggregate([
            {"$match": {"course": course_id}},
            {"$group": {"_id": "$course", "sum": {"$sum": "$rating"}, "count": {"$sum": 1}}},
        ])
        # aggregate over zero rows yields no group document
        if not rows:
            return 0.0, 0
        return float(rows[0]["sum"]), int(rows[0]["count"])

    def recompute(self, course_id: str) -> Dict[str, Any]:
        total, count = 0.0, 0
        for repo in self.sources:
            s, c = self._aggregate(repo, course_id)
            total += s
            count += c

        rating = round(total / count, 2) if count else 0
        self.courses.update(course_id, {"rating": rating, "numberOfReviews": count})
        logging.info(f"[ratings.recompute] course={course_id} rating={rating} reviews={count}")
        return {"rating": rating, "numberOfReviews": count}
