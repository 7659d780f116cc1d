from enum import Enum
from typing import Optional

from pydantic import Field

from src.models.base import ApiModel


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class EnrollIn(ApiModel):
    courseId: str = Field(..., min_length=1)


class EnrollmentUpdate(ApiModel):
    paymentStatus: Optional[PaymentStatus] = None
    certificateIssued: Optional[bool] = None


class ProgressIn(ApiModel):
    moduleId: str = Field(..., min_length=1)
    lessonId: str = Field(..., min_length=1)
