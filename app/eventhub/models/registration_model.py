from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.timestamps import utcnow


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        # one live registration per (event, user); cancelled rows are kept for history
        Index(
            "uq_active_registration",
            "event_id",
            "user_id",
            unique=True,
            postgresql_where=text("status != 'cancelled'"),
            sqlite_where=text("status != 'cancelled'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String, nullable=False, default="registered")
    registration_date = Column(DateTime, default=utcnow)
    cancelled_at = Column(DateTime, nullable=True)

    # QR credential
    qr_token = Column(String, nullable=True, unique=True)
    qr_secret = Column(String, nullable=True)
    qr_code_data = Column(Text, nullable=True)

    # attendance
    attendance_marked = Column(Boolean, nullable=False, default=False)
    attendance_status = Column(String, nullable=True)
    attended_at = Column(DateTime, nullable=True)

    # feedback
    feedback_rating = Column(Integer, nullable=True)
    feedback_comment = Column(Text, nullable=True)
    feedback_submitted_at = Column(DateTime, nullable=True)

    # certificate
    certificate_issued = Column(Boolean, nullable=False, default=False)
    certificate_number = Column(String, nullable=True, unique=True)
    certificate_url = Column(String, nullable=True)
    certificate_issued_at = Column(DateTime, nullable=True)

    # Relationships
    event = relationship("Event", back_populates="registrations")
    user = relationship("User", back_populates="registrations")
    attendance_logs = relationship(
        "AttendanceLog",
        back_populates="registration",
        cascade="all, delete-orphan",
        order_by="AttendanceLog.id",
    )
