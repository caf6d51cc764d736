from fastapi import APIRouter, Depends

from classnote.access import require_teacher
from classnote.deps import get_config, get_storage
from classnote.models.user import User
from classnote.schemas.evaluation_schema import DashboardStats
from classnote.storage import Storage
from classnote.utils.time_utils import current_week_number

router = APIRouter()

@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    teacher: User = Depends(require_teacher),
    storage: Storage = Depends(get_storage),
    config=Depends(get_config),
):
    current_week = current_week_number(config.SEMESTER_START)
    students = await storage.get_all_students()

    return DashboardStats(
        total_students=len(students),
        submitted_this_week=await storage.count_students_with_records_in_week(current_week),
        current_week=current_week,
        evaluations_generated=await storage.count_evaluations(),
    )
