from pydantic import BaseModel, Field
from typing import List, Optional

class ProfessorOut(BaseModel):
    id: str
    first_name: str
    last_name: str

class ReviewAuthor(BaseModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    profile_picture: Optional[str] = None

class Review(BaseModel):
    id: str
    rating: float
    comment: str
    syllabus: Optional[str] = None
    anonymous: bool = False
    author: Optional[ReviewAuthor] = None  # None for anonymous reviews
    professors: List[ProfessorOut] = []

class ReviewIn(BaseModel):
    rating: float = Field(0, le=5)
    comment: str = ""
    professor_first_name: str = ""
    professor_last_name: str = ""
    syllabus: Optional[str] = None
    anonymous: bool = False

class Tutor(BaseModel):
    id: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    profile_picture: Optional[str] = None

class CourseSummary(BaseModel):
    id: str
    code: str
    name: str
    subject: str
    average_rating: float

class CourseDetail(BaseModel):
    id: str
    code: str
    name: str
    subject: str
    syllabus: Optional[str] = None
    average_rating: float
    num_reviews: int
    professors: List[ProfessorOut]
    reviews: List[Review]
    tutors: List[Tutor]
    is_saved: bool = False
    is_tutor: bool = False

class Message(BaseModel):
    message: str
