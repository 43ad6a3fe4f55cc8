#!/usr/bin/env python3
"""
Script to create database tables
Run this after the database is created to set up all tables
"""
import logging
import os
import sys

# Add the app directory to the path
app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from sqlalchemy.exc import SQLAlchemyError

from eventhub.constant_file import database_url
from eventhub.database import Base, create_session_factory
from eventhub.models.user_model import User  # noqa: F401
from eventhub.models.club_model import Club, ClubMember  # noqa: F401
from eventhub.models.event_model import Event  # noqa: F401
from eventhub.models.registration_model import Registration  # noqa: F401
from eventhub.models.attendance_model import AttendanceLog  # noqa: F401
from eventhub.models.audit_model import AuditLog  # noqa: F401

logger = logging.getLogger("create_tables")


def create_tables(url=None):
    """Create all database tables"""
    engine, _ = create_session_factory(url or database_url())
    try:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
        return True
    except SQLAlchemyError as e:
        logger.error("Error creating tables: %s", e)
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(0 if create_tables() else 1)
