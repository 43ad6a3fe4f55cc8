from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from eventhub.database import Base
from eventhub.models.timestamps import utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)

    club_id = Column(Integer, ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    event_type = Column(String, nullable=False, default="other")
    poster_url = Column(String, nullable=True)

    # location
    venue_address = Column(String, nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
    online_link = Column(String, nullable=True)

    # schedule
    event_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=True)
    registration_open_date = Column(DateTime, nullable=True)
    registration_close_date = Column(DateTime, nullable=True)

    # capacity; max_capacity NULL means unlimited
    max_capacity = Column(Integer, nullable=True)
    registered_count = Column(Integer, nullable=False, default=0)

    is_published = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    club = relationship("Club", back_populates="events")
    creator = relationship("User")
    registrations = relationship("Registration", back_populates="event", cascade="all, delete-orphan")

    @property
    def club_name(self):
        return self.club.name if self.club else None
