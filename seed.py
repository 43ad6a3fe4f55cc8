#!/usr/bin/env python3
"""
Seed the first admin account.
Reads ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME from the environment (.env).
"""
import logging
import os
import sys

app_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'app')
sys.path.insert(0, app_dir)

from create_tables import create_tables
from eventhub.constant_file import admin_email, admin_name, admin_password, database_url
from eventhub.database import create_session_factory
from eventhub.models.user_model import User
from eventhub.security import hash_password

logger = logging.getLogger("seed")


def seed_admin(url=None):
    if not admin_password:
        logger.error("ADMIN_PASSWORD is not set")
        return False

    url = url or database_url()
    if not create_tables(url):
        return False

    _, SessionLocal = create_session_factory(url)
    db = SessionLocal()
    try:
        email = admin_email.strip().lower()
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.role = "admin"
            logger.info("Promoted existing user %s to admin", email)
        else:
            db.add(User(
                email=email,
                full_name=admin_name,
                password_hash=hash_password(admin_password),
                role="admin",
            ))
            logger.info("Created admin %s", email)
        db.commit()
        return True
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    sys.exit(0 if seed_admin() else 1)
