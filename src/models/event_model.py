from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from src.models.base import ApiModel


class EventType(str, Enum):
    webinar = "Webinar"
    workshop = "Workshop"
    seminar = "Seminar"
    conference = "Conference"


class EventIn(ApiModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    eventDate: datetime
    eventTime: str = Field(..., min_length=1)  # e.g. "10:00 AM"
    eventType: EventType = EventType.webinar.value
    speaker: str = Field(..., min_length=1)
    banner: Optional[str] = None
    registrationLink: Optional[str] = None
    seatsAvailable: int = Field(100, ge=0)
    isActive: bool = True


class EventUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    eventDate: Optional[datetime] = None
    eventTime: Optional[str] = Field(None, min_length=1)
    eventType: Optional[EventType] = None
    speaker: Optional[str] = Field(None, min_length=1)
    banner: Optional[str] = None
    registrationLink: Optional[str] = None
    seatsAvailable: Optional[int] = Field(None, ge=0)
    isActive: Optional[bool] = None
