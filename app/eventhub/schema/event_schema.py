from pydantic import BaseModel, Field, model_validator
from typing import Literal, Optional
from datetime import datetime

EventType = Literal["seminar", "workshop", "hackathon", "competition", "festival", "lecture", "other"]


class EventCreate(BaseModel):
    club_id: int
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    event_type: EventType = "other"
    poster_url: Optional[str] = None
    venue_address: Optional[str] = None
    is_online: bool = False
    online_link: Optional[str] = None
    event_date: datetime
    end_date: Optional[datetime] = None
    registration_open_date: Optional[datetime] = None
    registration_close_date: Optional[datetime] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    is_published: bool = True

    @model_validator(mode="after")
    def check_schedule(self):
        if self.end_date and self.end_date < self.event_date:
            raise ValueError("end_date must not be before event_date")
        if (
            self.registration_open_date
            and self.registration_close_date
            and self.registration_close_date < self.registration_open_date
        ):
            raise ValueError("registration_close_date must not be before registration_open_date")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_type: Optional[EventType] = None
    poster_url: Optional[str] = None
    venue_address: Optional[str] = None
    is_online: Optional[bool] = None
    online_link: Optional[str] = None
    event_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    registration_open_date: Optional[datetime] = None
    registration_close_date: Optional[datetime] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    is_published: Optional[bool] = None

    class Config:
        extra = "ignore"


class EventOut(BaseModel):
    id: int
    club_id: int
    created_by: Optional[int] = None
    title: str
    description: Optional[str] = None
    event_type: str
    poster_url: Optional[str] = None
    venue_address: Optional[str] = None
    is_online: bool
    online_link: Optional[str] = None
    event_date: datetime
    end_date: Optional[datetime] = None
    registration_open_date: Optional[datetime] = None
    registration_close_date: Optional[datetime] = None
    max_capacity: Optional[int] = None
    registered_count: int
    is_published: bool

    class Config:
        from_attributes = True


class EventDetailOut(EventOut):
    club_name: Optional[str] = None


class ChairpersonEventOut(EventDetailOut):
    attended_count: int = 0
