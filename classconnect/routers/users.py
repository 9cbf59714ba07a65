from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional
import logging
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError
from classconnect.core import security
from classconnect.core.config import db
from classconnect.models.course import CourseSummary
from classconnect.models.user import UserOut, UserUpdate, SavedCourseIn, PublicProfile
from classconnect.services import course_service

router = APIRouter(prefix="/users", tags=["users"])
log = logging.getLogger(__name__)

SAVE_LOGIN_MESSAGE = "You must be logged in to save this course."

@router.get("/me", response_model=UserOut)
def get_profile(current_user = Depends(security.get_current_active_user)):
    return UserOut(**current_user, id=str(current_user["_id"]))

@router.put("/me", response_model=UserOut)
def update_profile(data: UserUpdate, current_user = Depends(security.get_current_active_user)):
    update_data = {k: v for k, v in data.dict(exclude_none=True).items()}
    if update_data:
        db["users"].update_one({"_id": current_user["_id"]}, {"$set": update_data})
    updated = db["users"].find_one({"_id": current_user["_id"]})
    return UserOut(**updated, id=str(updated["_id"]))


@router.get("/me/saved-courses", response_model=List[CourseSummary])
def list_saved_courses(current_user = Depends(security.get_current_active_user)):
    try:
        return course_service.get_saved_courses(current_user)
    except PyMongoError:
        log.exception("Error fetching saved courses")
        raise HTTPException(status_code=500, detail="Error fetching saved courses.")


def _update_saved(user: dict, course_id: str, update: dict) -> dict:
    try:
        updated = db["users"].find_one_and_update(
            {"_id": user["_id"]},
            update,
            return_document=ReturnDocument.AFTER
        )
        if not updated:
            raise HTTPException(404, "User not found")
        saved = updated.get("saved_courses", [])
        course_service.store_saved_courses(str(user["_id"]), saved)
    except PyMongoError:
        log.exception("Error saving course %s", course_id)
        raise HTTPException(status_code=500, detail="Error saving course.")
    return {"saved_courses": saved}


@router.post("/me/saved-courses", status_code=200)
def save_course(fav: SavedCourseIn, current_user: Optional[dict] = Depends(security.get_current_user)):
    user = security.require_user(current_user, SAVE_LOGIN_MESSAGE)
    oid = course_service.to_object_id(fav.course_id)
    if not oid or not db["courses"].find_one({"_id": oid}, {"_id": 1}):
        raise HTTPException(404, "Course not found")
    return _update_saved(user, fav.course_id, {"$addToSet": {"saved_courses": fav.course_id}})


@router.delete("/me/saved-courses/{course_id}", status_code=200)
def unsave_course(course_id: str, current_user: Optional[dict] = Depends(security.get_current_user)):
    user = security.require_user(current_user, SAVE_LOGIN_MESSAGE)
    return _update_saved(user, course_id, {"$pull": {"saved_courses": course_id}})


@router.get("/{user_id}", response_model=PublicProfile)
def get_public_profile(user_id: str):
    """Profile shown to other students, including the courses the user tutors."""
    oid = course_service.to_object_id(user_id)
    user = db["users"].find_one({"_id": oid}) if oid else None
    if not user:
        raise HTTPException(404, "User not found")
    tutored = course_service.find_by_ids("courses", user.get("courses_tutored", []))
    return PublicProfile(
        id=user_id,
        first_name=user.get("first_name", ""),
        last_name=user.get("last_name", ""),
        email=user.get("email", ""),
        graduation_year=user.get("graduation_year"),
        profile_picture=user.get("profile_picture"),
        courses_tutored=[course_service.summarize(c) for c in tutored],
    )
