from datetime import datetime
from typing import Optional
from pydantic import Field
from classnote.schemas.base import CamelModel, NonEmptyStr

class GenerateEvaluationRequest(CamelModel):
    student_id: NonEmptyStr
    subject: NonEmptyStr
    period_start: Optional[int] = Field(None, ge=1)
    period_end: Optional[int] = Field(None, ge=1)

class EvaluationCreate(CamelModel):
    student_id: NonEmptyStr
    subject: NonEmptyStr
    content: NonEmptyStr
    period_start: int = Field(..., ge=1)
    period_end: int = Field(..., ge=1)

class EvaluationUpdate(CamelModel):
    content: NonEmptyStr

class EvaluationResponse(CamelModel):
    id: str
    student_id: str
    subject: str
    content: str
    generated_by: str
    period_start: int
    period_end: int
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class DashboardStats(CamelModel):
    total_students: int
    submitted_this_week: int
    current_week: int
    evaluations_generated: int
