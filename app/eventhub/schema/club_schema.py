from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import datetime


class ClubCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    website_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ClubMemberCreate(BaseModel):
    user_id: int
    role: Literal["chairperson", "member"] = "chairperson"


class ClubOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    website_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class ClubMemberOut(BaseModel):
    id: int
    club_id: int
    user_id: int
    role: str
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True
