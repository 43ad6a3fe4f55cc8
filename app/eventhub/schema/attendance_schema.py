from pydantic import AliasChoices, BaseModel, Field
from typing import Literal, Optional

AttendanceStatus = Literal["present", "absent", "late", "excused"]


class ScanRequest(BaseModel):
    qr_data: str = Field(..., min_length=1, validation_alias=AliasChoices("qr_data", "qrData"))
    event_id: int = Field(..., validation_alias=AliasChoices("event_id", "eventId"))
    latitude: Optional[float] = Field(None, validation_alias=AliasChoices("latitude", "lat"))
    longitude: Optional[float] = Field(None, validation_alias=AliasChoices("longitude", "long"))


class ManualAttendanceRequest(BaseModel):
    registration_id: int = Field(..., validation_alias=AliasChoices("registration_id", "registrationId"))
    event_id: int = Field(..., validation_alias=AliasChoices("event_id", "eventId"))
    status: AttendanceStatus
    notes: Optional[str] = None
