"""Index setup for the application's collections."""

import logging
from pymongo import ASCENDING

from classconnect.core.config import db

log = logging.getLogger(__name__)


def ensure_indexes() -> None:
    """Ensure lookup and uniqueness indexes exist."""
    db["courses"].create_index([("code", ASCENDING)], unique=True, name="course_code")
    db["users"].create_index([("email", ASCENDING)], unique=True, name="user_email")
    db["users"].create_index([("username", ASCENDING)], unique=True, name="user_username")
    db["reviews"].create_index([("course", ASCENDING)], name="review_course")
    db["professors"].create_index(
        [("first_name", ASCENDING), ("last_name", ASCENDING)], name="professor_name"
    )
    log.info("Ensured collection indexes exist")
