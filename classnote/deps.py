from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from classnote.database import get_db
from classnote.storage import Storage

def get_config(request: Request):
    return request.app.state.config

def get_evaluator(request: Request):
    return request.app.state.evaluator

async def get_storage(db: AsyncSession = Depends(get_db)) -> Storage:
    return Storage(db)

def get_fallback_timetable(request: Request) -> dict:
    return request.app.state.fallback_timetable
