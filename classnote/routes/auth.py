from fastapi import APIRouter, Depends, HTTPException, Request, status

from classnote.access import get_current_user
from classnote.deps import get_config, get_storage
from classnote.models.user import User, UserRole
from classnote.schemas.auth_schema import UserCreate, UserLogin, UserResponse
from classnote.security import hash_password, check_password
from classnote.storage import Storage

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    user_in: UserCreate,
    storage: Storage = Depends(get_storage),
    config=Depends(get_config),
):
    if await storage.get_user_by_username(user_in.username):
        raise HTTPException(status_code=409, detail="이미 사용 중인 아이디입니다.")

    is_student = user_in.role == UserRole.STUDENT
    student_number = (user_in.student_number or "").strip() or None
    new_user = await storage.create_user(
        username=user_in.username,
        password=hash_password(user_in.password),
        name=user_in.name,
        role=user_in.role,
        student_number=student_number if is_student else None,
        class_room=user_in.class_room or config.DEFAULT_CLASS_ROOM,
    )

    # Set Session Cookie
    request.session["user_id"] = new_user.id
    return new_user

@router.post("/login", response_model=UserResponse)
async def login(request: Request, user_in: UserLogin, storage: Storage = Depends(get_storage)):
    user = await storage.get_user_by_username(user_in.username)

    matches, new_hash = check_password(user_in.password, user.password) if user else (False, None)
    if not matches:
        raise HTTPException(status_code=401, detail="아이디 또는 비밀번호가 올바르지 않습니다.")
    if new_hash:
        user = await storage.update_user_password(user.id, new_hash)

    request.session["user_id"] = user.id
    return user

@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"message": "로그아웃되었습니다."}

@router.get("/user", response_model=UserResponse)
async def get_user(user: User = Depends(get_current_user)):
    return user
