from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
from datetime import datetime
import logging
from pymongo.errors import PyMongoError
from classconnect.core import security
from classconnect.core.config import db
from classconnect.models.course import Message
from classconnect.services.course_service import to_object_id

router = APIRouter(prefix="/reviews", tags=["reviews"])
log = logging.getLogger(__name__)

@router.post("/{review_id}/report", response_model=Message, status_code=201)
def report_review(review_id: str, current_user: Optional[dict] = Depends(security.get_current_user)):
    """Flag a review for moderation."""
    user = security.require_user(current_user, "You must be logged in to report a review.")
    oid = to_object_id(review_id)
    review = db["reviews"].find_one({"_id": oid}) if oid else None
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    try:
        db["review_reports"].insert_one({
            "review": review_id,
            "reporter": str(user["_id"]),
            "review_creator": review.get("user"),
            "created_at": datetime.utcnow(),
        })
    except PyMongoError:
        log.exception("Error reporting review")
        raise HTTPException(status_code=500, detail="Error reporting review.")
    log.info("Review %s reported by user %s", review_id, user["_id"])
    return Message(message="Review has been reported and will be reviewed further.")
