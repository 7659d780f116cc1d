from enum import Enum
from typing import List, Optional

from pydantic import Field

from src.models.base import ApiModel


class ExperienceLevel(str, Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"


class LessonIn(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    lessonTitle: str = Field(..., min_length=1)
    lessonContent: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)  # e.g. "30 mins", "1 hour"


class ModuleIn(ApiModel):
    id: Optional[str] = Field(default=None, alias="_id")
    module: str = Field(..., min_length=1)
    lessons: List[LessonIn] = []


class CourseIn(ApiModel):
    title: str = Field(..., min_length=3, max_length=100)
    category: str = Field(..., min_length=1)
    experienceLevel: ExperienceLevel = ExperienceLevel.beginner.value
    shortDescription: str = Field(..., min_length=10, max_length=200)
    longDescription: str = Field(..., min_length=20)
    courseCurriculum: List[ModuleIn] = []
    price: float = Field(..., ge=0)
    thumbnail: str = ""
    instructor: str = Field(..., min_length=1)
    isActive: bool = True


class CourseUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    category: Optional[str] = Field(None, min_length=1)
    experienceLevel: Optional[ExperienceLevel] = None
    shortDescription: Optional[str] = Field(None, min_length=10, max_length=200)
    longDescription: Optional[str] = Field(None, min_length=20)
    courseCurriculum: Optional[List[ModuleIn]] = None
    price: Optional[float] = Field(None, ge=0)
    thumbnail: Optional[str] = None
    instructor: Optional[str] = Field(None, min_length=1)
    isActive: Optional[bool] = None
