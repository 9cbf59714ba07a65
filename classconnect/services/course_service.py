"""Course, saved-course and tutor lookups backed by the record cache."""

import logging
from typing import Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from classconnect.core.config import db, settings
from classconnect.utils.cache import RecordCache
from classconnect.utils.filters import course_subject

log = logging.getLogger(__name__)

# Course detail documents keyed by course code
course_cache = RecordCache(ttl=settings.CACHE_TTL_SECONDS)
# Saved-course summaries keyed by user id
saved_courses_cache = RecordCache(ttl=settings.CACHE_TTL_SECONDS)


def to_object_id(value) -> Optional[ObjectId]:
    """Parse a string id, returning None when it is malformed."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def find_by_ids(collection: str, ids: List[str]) -> List[dict]:
    """Fetch documents by string id in the order given; unknown ids are skipped."""
    oids = [oid for oid in (to_object_id(i) for i in ids) if oid is not None]
    if not oids:
        return []
    found = {str(d["_id"]): d for d in db[collection].find({"_id": {"$in": oids}})}
    return [found[i] for i in ids if i in found]


def summarize(course: dict) -> dict:
    return {
        "id": str(course["_id"]),
        "code": course.get("code") or "",
        "name": course.get("name") or "",
        "subject": course_subject(course),
        "average_rating": float(course.get("average_rating") or 0),
    }


def get_all_courses() -> List[dict]:
    return [summarize(c) for c in db["courses"].find({})]


def expand_course(course: dict) -> dict:
    """Attach professor and review documents, with each review's author and professors."""
    reviews = find_by_ids("reviews", course.get("reviews", []))
    professor_ids = list(course.get("professors", []))
    for review in reviews:
        professor_ids.extend(p for p in review.get("professors", []) if p not in professor_ids)
    professors: Dict[str, dict] = {str(p["_id"]): p for p in find_by_ids("professors", professor_ids)}
    authors: Dict[str, dict] = {
        str(u["_id"]): u for u in find_by_ids("users", [r["user"] for r in reviews if r.get("user")])
    }

    expanded_reviews = []
    for review in reviews:
        expanded_reviews.append({
            **review,
            "expand": {
                "user": authors.get(review.get("user")),
                "professors": [professors[p] for p in review.get("professors", []) if p in professors],
            },
        })
    return {
        **course,
        "expand": {
            "reviews": expanded_reviews,
            "professors": [professors[p] for p in course.get("professors", []) if p in professors],
        },
    }


def get_course_by_code(code: str) -> Optional[dict]:
    """Expanded course for `code`, served from cache while fresh."""
    cached = course_cache.get(code)
    if cached is not None:
        return cached
    doc = db["courses"].find_one({"code": code})
    if not doc:
        return None
    expanded = expand_course(doc)
    course_cache.set(code, expanded)
    log.info("Fetched course '%s' (%d reviews)", code, len(expanded["expand"]["reviews"]))
    return expanded


def refresh_course(course_id: ObjectId) -> Optional[dict]:
    """Refetch a course after a write and overwrite its cache entry."""
    doc = db["courses"].find_one({"_id": course_id})
    if not doc:
        return None
    expanded = expand_course(doc)
    course_cache.set(doc["code"], expanded)
    return expanded


def fetch_tutor_details(tutor_ids: List[str]) -> List[dict]:
    return find_by_ids("users", tutor_ids)


def get_saved_courses(user: dict) -> List[dict]:
    """Summaries of a user's saved courses, served from cache while fresh."""
    key = str(user["_id"])
    cached = saved_courses_cache.get(key)
    if cached is not None:
        return cached
    return store_saved_courses(key, user.get("saved_courses", []))


def store_saved_courses(user_id: str, course_ids: List[str]) -> List[dict]:
    summaries = [summarize(c) for c in find_by_ids("courses", course_ids)]
    saved_courses_cache.set(user_id, summaries)
    return summaries
