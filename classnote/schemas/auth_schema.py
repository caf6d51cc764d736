from datetime import datetime
from typing import Literal, Optional
from classnote.schemas.base import CamelModel, NonEmptyStr

class UserCreate(CamelModel):
    username: NonEmptyStr
    password: NonEmptyStr
    name: NonEmptyStr
    role: Literal["teacher", "student"] = "student"
    student_number: Optional[str] = None
    class_room: Optional[str] = None

class UserLogin(CamelModel):
    username: NonEmptyStr
    password: NonEmptyStr

class UserResponse(CamelModel):
    id: str
    username: str
    role: str
    name: str
    student_number: Optional[str] = None
    class_room: Optional[str] = None
    created_at: Optional[datetime] = None
