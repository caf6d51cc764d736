from datetime import datetime
from typing import Optional
from pydantic import Field
from classnote.schemas.base import CamelModel, NonEmptyStr

class LearningRecordCreate(CamelModel):
    student_id: Optional[str] = None # Ignored for students
    weekly_material_id: Optional[str] = None
    subject: NonEmptyStr
    content: NonEmptyStr
    reflection: Optional[str] = None
    week: int = Field(..., ge=1)
    day_of_week: Optional[str] = None
    is_submitted: bool = True

class LearningRecordUpdate(CamelModel):
    weekly_material_id: Optional[str] = None
    subject: Optional[NonEmptyStr] = None
    content: Optional[NonEmptyStr] = None
    reflection: Optional[str] = None
    week: Optional[int] = Field(None, ge=1)
    day_of_week: Optional[str] = None
    is_submitted: Optional[bool] = None
    submitted_at: Optional[datetime] = None

class LearningRecordResponse(CamelModel):
    id: str
    student_id: str
    weekly_material_id: Optional[str] = None
    subject: str
    content: str
    reflection: Optional[str] = None
    week: int
    day_of_week: Optional[str] = None
    is_submitted: bool
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class StudentSummary(CamelModel):
    id: str
    name: str
    student_number: str

class DailySummaryRecord(LearningRecordResponse):
    student: Optional[StudentSummary] = None
