from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from classnote.access import require_teacher
from classnote.deps import get_config, get_storage
from classnote.models.user import User
from classnote.schemas.auth_schema import UserResponse
from classnote.schemas.student_schema import (
    StudentCreate,
    StudentUpdate,
    StudentResponse,
    BulkStudentRequest,
    BulkCsvRequest,
    BulkRowResponse,
    ResetPasswordRequest,
)
from classnote.security import hash_password
from classnote.storage import Storage
from classnote.utils.bulk_parser import parse_student_lines, BulkParseError

router = APIRouter()

@router.get("", response_model=List[StudentResponse])
async def list_students(
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    return await storage.get_all_students()

@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(
    req: StudentCreate,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
    config=Depends(get_config),
):
    return await storage.create_student(
        name=req.name,
        student_number=req.student_number,
        class_room=req.class_room or config.DEFAULT_CLASS_ROOM,
    )

def _hash_rows(rows: List[dict]) -> List[dict]:
    # CPU-bound, runs in the threadpool
    return [{**row, "password": hash_password(row["password"])} for row in rows]

async def _create_bulk(rows: List[dict], storage: Storage, class_room: str) -> List[BulkRowResponse]:
    hashed = await run_in_threadpool(_hash_rows, rows)
    results = await storage.create_bulk_students(hashed, class_room)
    return [
        BulkRowResponse(
            row=r.row,
            username=r.username,
            success=r.success,
            user=UserResponse.model_validate(r.user) if r.user else None,
            error=r.error,
        )
        for r in results
    ]

@router.post("/bulk", response_model=List[BulkRowResponse], status_code=status.HTTP_201_CREATED)
async def create_students_bulk(
    req: BulkStudentRequest,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
    config=Depends(get_config),
):
    rows = [row.model_dump() for row in req.students]
    return await _create_bulk(rows, storage, config.DEFAULT_CLASS_ROOM)

@router.post("/bulk-csv", response_model=List[BulkRowResponse], status_code=status.HTTP_201_CREATED)
async def create_students_bulk_csv(
    req: BulkCsvRequest,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
    config=Depends(get_config),
):
    try:
        rows = parse_student_lines(req.text)
    except BulkParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not rows:
        raise HTTPException(status_code=400, detail="학생 목록이 필요합니다.")
    return await _create_bulk(rows, storage, config.DEFAULT_CLASS_ROOM)

@router.put("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: str,
    req: StudentUpdate,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    changes = {k: v for k, v in req.model_dump(exclude_unset=True).items() if v is not None}
    student = await storage.update_student(student_id, changes)
    if not student:
        raise HTTPException(status_code=404, detail="학생을 찾을 수 없습니다.")
    return student

@router.delete("/{student_id}")
async def delete_student(
    student_id: str,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    await storage.delete_student(student_id)
    return {"message": "학생이 삭제되었습니다."}

@router.post("/{student_id}/reset-password")
async def reset_password(
    student_id: str,
    req: ResetPasswordRequest,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    # Same answer whether the student or the linked account is missing
    not_found = HTTPException(status_code=404, detail="학생을 찾을 수 없습니다.")

    student = await storage.get_student(student_id)
    if not student or not student.user_id:
        raise not_found

    updated_user = await storage.update_user_password(student.user_id, hash_password(req.new_password))
    if not updated_user:
        raise not_found

    return {"message": "비밀번호가 성공적으로 초기화되었습니다."}
