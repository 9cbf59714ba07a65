from pydantic import BaseModel
from typing import List, Optional

from .course import CourseSummary

class UserBase(BaseModel):
    username: str
    email: str
    first_name: str
    last_name: str
    graduation_year: Optional[str] = None

class UserCreate(UserBase):
    password: str

class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    graduation_year: Optional[str] = None
    profile_picture: Optional[str] = None

class UserOut(UserBase):
    id: str
    profile_picture: Optional[str] = None
    is_active: bool = True
    saved_courses: List[str] = []
    courses_tutored: List[str] = []
    reviews: List[str] = []

class PublicProfile(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    graduation_year: Optional[str] = None
    profile_picture: Optional[str] = None
    courses_tutored: List[CourseSummary] = []

class SavedCourseIn(BaseModel):
    course_id: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
