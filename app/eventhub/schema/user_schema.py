from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime


class SignupRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = None
    phone: Optional[str] = None
    role: Literal["student", "chairperson"] = "student"

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()

    @field_validator("full_name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Full name is required")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = None
    phone: Optional[str] = None
    profile_picture_url: Optional[str] = None

    class Config:
        extra = "ignore"


class RoleUpdate(BaseModel):
    role: Literal["student", "chairperson", "admin"]


class MembershipOut(BaseModel):
    club_id: int
    role: str
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserOut(BaseModel):
    id: int
    email: str
    full_name: str
    role: str
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[int] = None
    phone: Optional[str] = None
    profile_picture_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserDetailOut(UserOut):
    club_memberships: List[MembershipOut] = []
