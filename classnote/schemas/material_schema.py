from datetime import datetime
from typing import Any, Dict, List, Optional
from classnote.schemas.base import CamelModel

class WeeklyMaterialResponse(CamelModel):
    id: str
    title: str
    week: int
    start_date: str
    end_date: str
    file_path: Optional[str] = None
    content: Optional[str] = None
    subjects: Optional[List[str]] = None
    timetable: Optional[Dict[str, Any]] = None
    uploaded_by: Optional[str] = None
    created_at: Optional[datetime] = None

class TimetableResponse(CamelModel):
    week: int
    timetable: Dict[str, Any]
