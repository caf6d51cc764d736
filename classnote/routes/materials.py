import json
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from classnote.access import get_current_user, require_teacher
from classnote.deps import get_config, get_evaluator, get_fallback_timetable, get_storage
from classnote.models.user import User
from classnote.schemas.material_schema import WeeklyMaterialResponse, TimetableResponse
from classnote.services.file_storage import save_upload, remove_file, UploadTooLarge
from classnote.storage import Storage

router = APIRouter()
logger = logging.getLogger(__name__)

# PDF text extraction is not implemented, uploads get this placeholder
PDF_PLACEHOLDER_CONTENT = "PDF 내용이 여기에 추출됩니다."

@router.get("", response_model=List[WeeklyMaterialResponse])
async def list_materials(
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return await storage.get_all_weekly_materials()

@router.post("", response_model=WeeklyMaterialResponse, status_code=status.HTTP_201_CREATED)
async def upload_material(
    title: Optional[str] = Form(None),
    week: Optional[str] = Form(None),
    start_date: Optional[str] = Form(None, alias="startDate"),
    end_date: Optional[str] = Form(None, alias="endDate"),
    subjects: Optional[str] = Form(None), # "국어,수학"
    timetable: Optional[str] = Form(None), # JSON object
    file: Optional[UploadFile] = File(None),
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
    evaluator=Depends(get_evaluator),
    config=Depends(get_config),
):
    if not title or not week or not start_date or not end_date:
        raise HTTPException(status_code=400, detail="모든 필드를 입력해주세요.")
    try:
        week_no = int(week)
    except ValueError:
        raise HTTPException(status_code=400, detail="주차는 숫자여야 합니다.")
    if week_no < 1:
        raise HTTPException(status_code=400, detail="주차는 1 이상이어야 합니다.")

    timetable_data = None
    if timetable:
        try:
            timetable_data = json.loads(timetable)
        except ValueError:
            raise HTTPException(status_code=400, detail="시간표 형식이 올바르지 않습니다.")
        if not isinstance(timetable_data, dict):
            raise HTTPException(status_code=400, detail="시간표 형식이 올바르지 않습니다.")

    subject_list = [s.strip() for s in subjects.split(",") if s.strip()] if subjects else []
    file_path = None
    content = ""

    if file and file.filename:
        try:
            file_path = await save_upload(file, config.UPLOAD_DIR, config.MAX_UPLOAD_SIZE)
        except UploadTooLarge as e:
            logger.info(f"Rejected upload: {e}")
            raise HTTPException(status_code=413, detail="파일 크기는 10MB를 넘을 수 없습니다.")

        if file.content_type == "application/pdf":
            content = PDF_PLACEHOLDER_CONTENT
            if not subject_list:
                subject_list = await evaluator.extract_subjects(content)

    try:
        return await storage.create_weekly_material(
            title=title,
            week=week_no,
            start_date=start_date,
            end_date=end_date,
            file_path=file_path,
            content=content,
            subjects=subject_list,
            timetable=timetable_data,
            uploaded_by=teacher.id,
        )
    except Exception:
        # Don't leave an orphaned file behind
        if file_path:
            remove_file(file_path)
        raise

@router.delete("/{material_id}")
async def delete_material(
    material_id: str,
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
):
    material = await storage.get_weekly_material(material_id)
    if not material:
        raise HTTPException(status_code=404, detail="자료를 찾을 수 없습니다.")

    await storage.delete_weekly_material(material)
    return {"message": "자료가 삭제되었습니다."}

@router.get("/timetable/{week}", response_model=TimetableResponse)
async def get_timetable(
    week: int,
    user: User = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    fallback_timetable: dict = Depends(get_fallback_timetable),
):
    material = await storage.get_weekly_material_by_week(week)
    if not material or not material.timetable:
        return TimetableResponse(week=week, timetable=fallback_timetable)
    return TimetableResponse(week=material.week, timetable=material.timetable)
