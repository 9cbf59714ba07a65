"""Average-rating helpers for courses and their reviews."""

from typing import Iterable, List, Optional


def average_rating(ratings: Iterable[Optional[float]], fallback: float = 0.0) -> float:
    """Arithmetic mean of `ratings`, or `fallback` when there are none.

    A missing rating counts as 0.
    """
    values: List[float] = [float(r or 0) for r in ratings]
    if not values:
        return fallback
    return sum(values) / len(values)


def course_average(course: dict, reviews: Iterable[dict]) -> float:
    """Displayed average for a course given its reviews."""
    fallback = float(course.get("average_rating") or 0)
    return average_rating((r.get("rating") for r in reviews), fallback=fallback)
