from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class RegistrationOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    status: str
    registration_date: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    qr_code_data: Optional[str] = None
    attendance_marked: bool
    attendance_status: Optional[str] = None
    attended_at: Optional[datetime] = None
    feedback_rating: Optional[int] = None
    feedback_comment: Optional[str] = None

    class Config:
        from_attributes = True


class RegisterConfirm(BaseModel):
    registration_id: int


class FeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
