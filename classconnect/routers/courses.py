from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional
from datetime import datetime
import logging
from pymongo.errors import PyMongoError
from classconnect.core import security
from classconnect.core.config import db, settings
from classconnect.models.course import (
    CourseSummary, CourseDetail, Review, ReviewIn, ReviewAuthor, ProfessorOut, Tutor, Message,
)
from classconnect.services import course_service
from classconnect.utils.filters import course_subject, course_subjects, filter_courses, filter_reviews
from classconnect.utils.ratings import average_rating, course_average

router = APIRouter(prefix="/courses", tags=["courses"])
log = logging.getLogger(__name__)


def _professor_out(doc: dict) -> dict:
    return {"id": str(doc["_id"]), "first_name": doc.get("first_name", ""), "last_name": doc.get("last_name", "")}


def _review_view(review: dict) -> dict:
    """Flatten an expanded review; the author is withheld for anonymous reviews."""
    expand = review.get("expand", {})
    author = expand.get("user")
    anonymous = bool(review.get("anonymous", False))
    return {
        "id": str(review["_id"]),
        "rating": float(review.get("rating") or 0),
        "comment": review.get("comment", ""),
        "syllabus": review.get("syllabus"),
        "anonymous": anonymous,
        "author": None if anonymous or not author else ReviewAuthor(
            id=str(author["_id"]),
            first_name=author.get("first_name", ""),
            last_name=author.get("last_name", ""),
            profile_picture=author.get("profile_picture"),
        ),
        "professors": [_professor_out(p) for p in expand.get("professors", [])],
    }


def _get_course_or_404(course_id: str) -> dict:
    oid = course_service.to_object_id(course_id)
    course = db["courses"].find_one({"_id": oid}) if oid else None
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.get("", response_model=List[CourseSummary])
def list_courses(
    subject: Optional[List[str]] = Query(None),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    q: str = Query(""),
):
    """List courses matching every active filter, best-rated first."""
    try:
        courses = course_service.get_all_courses()
    except PyMongoError:
        log.exception("Error fetching courses")
        raise HTTPException(status_code=500, detail="Error fetching courses.")
    return filter_courses(courses, subjects=subject, min_rating=min_rating, search=q)


@router.get("/subjects", response_model=List[str])
def list_subjects():
    try:
        courses = course_service.get_all_courses()
    except PyMongoError:
        log.exception("Error fetching courses")
        raise HTTPException(status_code=500, detail="Error fetching courses.")
    return course_subjects(courses)


@router.get("/{code}", response_model=CourseDetail)
def get_course(
    code: str,
    professor: str = Query(""),
    min_rating: float = Query(0, ge=0, le=5),
    has_syllabus: bool = Query(False),
    current_user: Optional[dict] = Depends(security.get_current_user),
):
    """Course page: average rating, filtered reviews, professors and tutors."""
    try:
        course = course_service.get_course_by_code(code)
        if not course:
            raise HTTPException(status_code=404, detail="Course not found")
        tutors = course_service.fetch_tutor_details(course.get("tutors", []))
    except PyMongoError:
        log.exception("Error fetching course '%s'", code)
        raise HTTPException(status_code=500, detail="Error fetching course.")

    reviews = course["expand"]["reviews"]
    views = filter_reviews(
        (_review_view(r) for r in reviews),
        professor=professor,
        min_rating=min_rating,
        has_syllabus=has_syllabus,
    )
    course_id = str(course["_id"])
    user_id = str(current_user["_id"]) if current_user else None
    return CourseDetail(
        id=course_id,
        code=course["code"],
        name=course.get("name") or "",
        subject=course_subject(course),
        syllabus=course.get("syllabus"),
        average_rating=course_average(course, reviews),
        num_reviews=len(reviews),
        professors=[ProfessorOut(**_professor_out(p)) for p in course["expand"]["professors"]],
        reviews=[Review(**v) for v in views],
        tutors=[
            Tutor(
                id=str(t["_id"]),
                first_name=t.get("first_name", ""),
                last_name=t.get("last_name", ""),
                email=t.get("email", ""),
                profile_picture=t.get("profile_picture"),
            )
            for t in tutors
        ],
        is_saved=bool(current_user) and course_id in current_user.get("saved_courses", []),
        is_tutor=user_id is not None and user_id in course.get("tutors", []),
    )


def _find_or_create_professor(first_name: str, last_name: str, course_id: str) -> Optional[str]:
    first_name, last_name = first_name.strip(), last_name.strip()
    if not first_name and not last_name:
        return None
    existing = db["professors"].find_one({"first_name": first_name, "last_name": last_name})
    if existing:
        return str(existing["_id"])
    res = db["professors"].insert_one(
        {"first_name": first_name, "last_name": last_name, "course": course_id}
    )
    log.info("Created professor %s %s", first_name, last_name)
    return str(res.inserted_id)


@router.post("/{course_id}/reviews", response_model=Review, status_code=201)
def add_review(course_id: str, review: ReviewIn, current_user=Depends(security.get_current_active_user)):
    """Create a review and fold it into the course's professors and average rating."""
    if len(review.comment.split()) > settings.MAX_REVIEW_WORDS:
        raise HTTPException(
            status_code=400,
            detail=f"Your comment exceeds the maximum word limit of {settings.MAX_REVIEW_WORDS} words.",
        )
    if not review.rating or review.rating <= 0:
        raise HTTPException(status_code=400, detail="Please provide a valid rating.")
    if not review.comment.strip():
        raise HTTPException(status_code=400, detail="Please provide a comment.")

    course = _get_course_or_404(course_id)
    user_id = str(current_user["_id"])
    try:
        professor_id = _find_or_create_professor(
            review.professor_first_name, review.professor_last_name, course_id
        )
        doc = {
            "course": course_id,
            "rating": review.rating,
            "comment": review.comment,
            "user": user_id,
            "syllabus": review.syllabus,
            "anonymous": review.anonymous,
            "professors": [professor_id] if professor_id else [],
            "created_at": datetime.utcnow(),
        }
        res = db["reviews"].insert_one(doc)
        review_id = str(res.inserted_id)

        ratings = [r.get("rating") for r in db["reviews"].find({"course": course_id}, {"rating": 1})]
        course_set = {"average_rating": average_rating(ratings, fallback=course.get("average_rating") or 0)}
        if review.syllabus:
            course_set["syllabus"] = review.syllabus
        update = {"$push": {"reviews": review_id}, "$set": course_set}
        if professor_id:
            update["$addToSet"] = {"professors": professor_id}
        db["courses"].update_one({"_id": course["_id"]}, update)
        db["users"].update_one({"_id": current_user["_id"]}, {"$push": {"reviews": review_id}})
        course_service.refresh_course(course["_id"])
    except PyMongoError:
        log.exception("Error saving review")
        raise HTTPException(status_code=500, detail="Error saving review.")

    log.info("User %s reviewed course %s (rating %.1f)", user_id, course["code"], review.rating)
    professors = course_service.find_by_ids("professors", [professor_id]) if professor_id else []
    return Review(**_review_view({
        **doc,
        "_id": res.inserted_id,
        "expand": {"user": current_user, "professors": professors},
    }))


@router.post("/{course_id}/tutors", response_model=Message)
def add_tutor(course_id: str, current_user: Optional[dict] = Depends(security.get_current_user)):
    """Register the current user as a tutor for the course."""
    user = security.require_user(current_user, "You must be logged in to tutor this course.")
    course = _get_course_or_404(course_id)
    user_id = str(user["_id"])
    if user_id in course.get("tutors", []):
        raise HTTPException(
            status_code=400, detail="You have already added yourself as a tutor for this course."
        )
    try:
        db["courses"].update_one({"_id": course["_id"]}, {"$addToSet": {"tutors": user_id}})
        db["users"].update_one({"_id": user["_id"]}, {"$addToSet": {"courses_tutored": course_id}})
        course_service.refresh_course(course["_id"])
    except PyMongoError:
        log.exception("Error adding tutor")
        raise HTTPException(
            status_code=500, detail="An error occurred while adding you as a tutor. Please try again."
        )
    log.info("User %s is now tutoring %s", user_id, course["code"])
    return Message(message="Successfully added as a tutor for this course.")
