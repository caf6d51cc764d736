"""
Access policy.

- No session: 401 everywhere.
- Teacher-only routes depend on require_teacher: 403 for anyone else.
- Students only ever see or touch their own Student profile. Handlers call
  resolve_student_id, which swaps whatever studentId the client sent for
  the caller's own profile id.
"""

from typing import Optional
from fastapi import Depends, HTTPException, Request, status

from classnote.deps import get_storage
from classnote.models.user import User
from classnote.storage import Storage

STUDENT_PROFILE_MISSING = "학생 정보를 찾을 수 없습니다."

async def get_current_user(request: Request, storage: Storage = Depends(get_storage)) -> User:
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="인증이 필요합니다.")

    user = await storage.get_user(user_id)
    if not user:
        request.session.clear()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="인증이 필요합니다.")
    return user

async def require_teacher(user: User = Depends(get_current_user)) -> User:
    if not user.is_teacher:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="교사 권한이 필요합니다.")
    return user

async def resolve_student_id(user: User, storage: Storage, requested_id: Optional[str]) -> Optional[str]:
    """
    Teachers get the id they asked for. Students always get their own
    profile id; a student without a profile gets 404.
    """
    if user.is_teacher:
        return requested_id

    student = await storage.get_student_by_user_id(user.id)
    if not student:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=STUDENT_PROFILE_MISSING)
    return student.id
