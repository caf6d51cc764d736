import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from classnote.access import get_current_user, require_teacher, resolve_student_id
from classnote.deps import get_evaluator, get_storage
from classnote.models.evaluation import GeneratedBy
from classnote.models.user import User
from classnote.schemas.evaluation_schema import (
    GenerateEvaluationRequest,
    EvaluationCreate,
    EvaluationUpdate,
    EvaluationResponse,
)
from classnote.storage import Storage

router = APIRouter()
logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "학생을 찾을 수 없습니다."

def _check_period(period_start: int, period_end: int):
    if period_start > period_end:
        raise HTTPException(status_code=400, detail="시작 주차는 종료 주차보다 클 수 없습니다.")

@router.get("", response_model=List[EvaluationResponse])
async def list_evaluations(
    student_id: Optional[str] = Query(None, alias="studentId"),
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    student_id = await resolve_student_id(user, storage, student_id)
    if not student_id:
        raise HTTPException(status_code=400, detail="학생 ID가 필요합니다.")
    return await storage.get_evaluations_by_student(student_id)

@router.post("/generate", response_model=EvaluationResponse, status_code=status.HTTP_201_CREATED)
async def generate_evaluation(
    req: GenerateEvaluationRequest,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
    evaluator=Depends(get_evaluator),
):
    student = await storage.get_student(req.student_id)
    if not student:
        raise HTTPException(status_code=404, detail=STUDENT_NOT_FOUND)

    records = await storage.get_learning_records_by_student_and_subject(student.id, req.subject)
    if not records:
        raise HTTPException(status_code=400, detail="해당 과목의 학습 기록이 없습니다.")

    weeks = [r.week for r in records]
    period_start = req.period_start if req.period_start is not None else min(weeks)
    period_end = req.period_end if req.period_end is not None else max(weeks)
    _check_period(period_start, period_end)

    # GenerationError propagates to the app-level handler (500, cause logged)
    content = await evaluator.generate_evaluation(
        student.name,
        req.subject,
        [{"week": r.week, "content": r.content, "reflection": r.reflection or ""} for r in records],
    )
    logger.info(f"Generated {req.subject} evaluation for student {student.id} (weeks {period_start}-{period_end})")

    return await storage.create_evaluation(
        student_id=student.id,
        subject=req.subject,
        content=content,
        generated_by=GeneratedBy.AI,
        period_start=period_start,
        period_end=period_end,
        created_by=teacher.id,
    )

@router.post("", response_model=EvaluationResponse, status_code=status.HTTP_201_CREATED)
async def create_evaluation(
    req: EvaluationCreate,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    _check_period(req.period_start, req.period_end)
    if not await storage.get_student(req.student_id):
        raise HTTPException(status_code=404, detail=STUDENT_NOT_FOUND)

    return await storage.create_evaluation(
        student_id=req.student_id,
        subject=req.subject,
        content=req.content,
        generated_by=GeneratedBy.MANUAL,
        period_start=req.period_start,
        period_end=req.period_end,
        created_by=teacher.id,
    )

@router.put("/{evaluation_id}", response_model=EvaluationResponse)
async def update_evaluation(
    evaluation_id: str,
    req: EvaluationUpdate,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    evaluation = await storage.update_evaluation(evaluation_id, {
        "content": req.content,
        "generated_by": GeneratedBy.MANUAL,
    })
    if not evaluation:
        raise HTTPException(status_code=404, detail="평어를 찾을 수 없습니다.")
    return evaluation

@router.delete("/{evaluation_id}")
async def delete_evaluation(
    evaluation_id: str,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    await storage.delete_evaluation(evaluation_id)
    return {"message": "평어가 삭제되었습니다."}
