"""Filtering and ordering of already-fetched course and review lists."""

from typing import Iterable, List, Optional


def course_subject(course: dict) -> str:
    """Subject of a course, derived from the code prefix when not stored."""
    subject = course.get("subject")
    if subject:
        return subject
    parts = (course.get("code") or "").split()
    return parts[0] if parts else ""


def course_subjects(courses: Iterable[dict]) -> List[str]:
    """Unique subjects in the order they first appear."""
    seen: List[str] = []
    for course in courses:
        subject = course_subject(course)
        if subject and subject not in seen:
            seen.append(subject)
    return seen


def matches_search(course: dict, search: str) -> bool:
    """True when every query token is in the course code or name."""
    code = (course.get("code") or "").lower()
    name = (course.get("name") or "").lower()
    return all(word in code or word in name for word in search.lower().split())


def filter_courses(
    courses: Iterable[dict],
    subjects: Optional[Iterable[str]] = None,
    min_rating: Optional[float] = None,
    search: str = "",
) -> List[dict]:
    """Apply the subject, rating and text filters, best-rated first.

    Inactive filters (no subjects, no minimum rating, blank search) are
    skipped. Ties keep their input order.
    """
    filtered = list(courses)
    wanted = set(subjects or [])
    if wanted:
        filtered = [c for c in filtered if course_subject(c) in wanted]
    if min_rating is not None:
        filtered = [c for c in filtered if (c.get("average_rating") or 0) >= min_rating]
    if search and search.strip():
        filtered = [c for c in filtered if matches_search(c, search)]
    filtered.sort(key=lambda c: c.get("average_rating") or 0, reverse=True)
    return filtered


def professor_name(professor: dict) -> str:
    return f"{professor.get('first_name', '')} {professor.get('last_name', '')}"


def filter_reviews(
    reviews: Iterable[dict],
    professor: str = "",
    min_rating: float = 0,
    has_syllabus: bool = False,
) -> List[dict]:
    """Filter expanded reviews by professor name, minimum rating and syllabus."""
    results = []
    for review in reviews:
        if professor and not any(
            professor_name(p) == professor for p in review.get("professors", [])
        ):
            continue
        if min_rating and min_rating > 0 and (review.get("rating") or 0) < min_rating:
            continue
        if has_syllabus and not review.get("syllabus"):
            continue
        results.append(review)
    return results
