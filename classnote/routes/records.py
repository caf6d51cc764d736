from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from classnote.access import get_current_user, require_teacher, resolve_student_id
from classnote.deps import get_storage
from classnote.models.learning_record import LearningRecord
from classnote.models.user import User
from classnote.schemas.record_schema import (
    LearningRecordCreate,
    LearningRecordUpdate,
    LearningRecordResponse,
    DailySummaryRecord,
    StudentSummary,
)
from classnote.storage import Storage
from classnote.utils.time_utils import get_seoul_time, to_school_time

router = APIRouter()

RECORD_NOT_FOUND = "학습 기록을 찾을 수 없습니다."
WEEK_REQUIRED = "주차 정보가 필요합니다."

# Optional columns a client may reset to null
CLEARABLE_FIELDS = {"weekly_material_id", "reflection", "day_of_week", "submitted_at"}

async def _get_owned_record(record_id: str, user: User, storage: Storage) -> LearningRecord:
    """Students only reach their own records; anything else looks missing."""
    record = await storage.get_learning_record(record_id)
    if not record:
        raise HTTPException(status_code=404, detail=RECORD_NOT_FOUND)
    if not user.is_teacher:
        own_id = await resolve_student_id(user, storage, None)
        if record.student_id != own_id:
            raise HTTPException(status_code=404, detail=RECORD_NOT_FOUND)
    return record

@router.get("", response_model=List[LearningRecordResponse])
async def list_records(
    student_id: Optional[str] = Query(None, alias="studentId"),
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    student_id = await resolve_student_id(user, storage, student_id)
    if not student_id:
        return await storage.get_all_learning_records()
    return await storage.get_learning_records_by_student(student_id)

@router.post("", response_model=LearningRecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    req: LearningRecordCreate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    student_id = await resolve_student_id(user, storage, req.student_id)
    if not student_id:
        raise HTTPException(status_code=400, detail="필수 정보가 누락되었습니다.")
    if not await storage.get_student(student_id):
        raise HTTPException(status_code=404, detail="학생 정보를 찾을 수 없습니다.")
    if req.weekly_material_id and not await storage.get_weekly_material(req.weekly_material_id):
        raise HTTPException(status_code=404, detail="자료를 찾을 수 없습니다.")

    return await storage.create_learning_record(
        student_id=student_id,
        weekly_material_id=req.weekly_material_id,
        subject=req.subject,
        content=req.content,
        reflection=req.reflection,
        week=req.week,
        day_of_week=req.day_of_week,
        is_submitted=req.is_submitted,
        submitted_at=get_seoul_time() if req.is_submitted else None,
    )

@router.get("/weekly", response_model=List[LearningRecordResponse])
async def weekly_records(
    week: Optional[int] = Query(None),
    day_of_week: Optional[str] = Query(None, alias="dayOfWeek"),
    student_id: Optional[str] = Query(None, alias="studentId"),
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    student_id = await resolve_student_id(user, storage, student_id)
    if week is None:
        raise HTTPException(status_code=400, detail=WEEK_REQUIRED)

    if student_id:
        return await storage.get_learning_records_by_student_week_and_day(student_id, week, day_of_week)
    if day_of_week:
        return await storage.get_learning_records_by_week_and_day(week, day_of_week)
    return await storage.get_learning_records_by_week(week)

@router.get("/daily-summary", response_model=List[DailySummaryRecord])
async def daily_summary(
    week: Optional[int] = Query(None),
    day_of_week: Optional[str] = Query(None, alias="dayOfWeek"),
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    if week is None:
        raise HTTPException(status_code=400, detail=WEEK_REQUIRED)

    if day_of_week:
        records = await storage.get_learning_records_by_week_and_day(week, day_of_week)
    else:
        records = await storage.get_learning_records_by_week(week)

    # Embed student info, one lookup per distinct student
    students = {}
    summary = []
    for record in records:
        if record.student_id not in students:
            students[record.student_id] = await storage.get_student(record.student_id)
        student = students[record.student_id]
        summary.append(DailySummaryRecord(
            **LearningRecordResponse.model_validate(record).model_dump(),
            student=StudentSummary.model_validate(student) if student else None,
        ))
    return summary

@router.get("/{record_id}", response_model=LearningRecordResponse)
async def get_record(
    record_id: str,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await _get_owned_record(record_id, user, storage)

@router.put("/{record_id}", response_model=LearningRecordResponse)
async def update_record(
    record_id: str,
    req: LearningRecordUpdate,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    record = await _get_owned_record(record_id, user, storage)

    changes = {
        k: v for k, v in req.model_dump(exclude_unset=True).items()
        if v is not None or k in CLEARABLE_FIELDS
    }
    if changes.get("weekly_material_id") and not await storage.get_weekly_material(changes["weekly_material_id"]):
        raise HTTPException(status_code=404, detail="자료를 찾을 수 없습니다.")
    if changes.get("submitted_at"):
        changes["submitted_at"] = to_school_time(changes["submitted_at"])
    if changes.get("is_submitted") and not changes.get("submitted_at") and not record.submitted_at:
        changes["submitted_at"] = get_seoul_time()

    return await storage.update_learning_record(record.id, changes)
