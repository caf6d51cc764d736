from datetime import datetime
from typing import List, Optional
from pydantic import Field
from classnote.schemas.base import CamelModel, NonEmptyStr
from classnote.schemas.auth_schema import UserResponse

class StudentCreate(CamelModel):
    name: NonEmptyStr
    student_number: NonEmptyStr
    class_room: Optional[str] = None

class StudentUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    student_number: Optional[NonEmptyStr] = None
    class_room: Optional[NonEmptyStr] = None
    is_active: Optional[bool] = None

class StudentResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    name: str
    student_number: str
    class_room: str
    is_active: bool
    created_at: Optional[datetime] = None

class BulkStudentRow(CamelModel):
    name: NonEmptyStr
    student_number: NonEmptyStr
    username: NonEmptyStr
    password: NonEmptyStr

class BulkStudentRequest(CamelModel):
    students: List[BulkStudentRow] = Field(..., min_length=1)

class BulkCsvRequest(CamelModel):
    text: str

class BulkRowResponse(CamelModel):
    row: int
    username: str
    success: bool
    user: Optional[UserResponse] = None
    error: Optional[str] = None

class ResetPasswordRequest(CamelModel):
    new_password: NonEmptyStr
