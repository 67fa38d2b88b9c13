from fastapi import APIRouter, Depends
from typing import Optional
from schemas.user import UserSchema, UserCreate, UserRoleUpdate
from services.user import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserSchema, summary="로그인한 사용자 조회 또는 생성")
async def create_or_get_user(
    user_data: UserCreate,
    service: UserService = Depends()
):
    """ 외부 인증 식별자로 사용자를 찾고, 처음 보는 식별자면 새로 만듭니다. """
    return service.create_or_get_user(user_data)


@router.put("/role", response_model=UserSchema, summary="역할 선택 (admin 이면 팀 생성)")
async def update_user_role(
    role_update: UserRoleUpdate,
    service: UserService = Depends()
):
    return service.update_user_role(role_update)


@router.get("/me", response_model=Optional[UserSchema], summary="현재 사용자 조회")
async def get_current_user(
    identity: Optional[str] = None,
    service: UserService = Depends()
):
    """ identity 가 없거나 등록되지 않았으면 null 을 반환합니다. """
    return service.get_current_user(identity)


@router.get("/by-email", response_model=Optional[UserSchema], summary="이메일로 사용자 조회")
async def get_user_by_email(
    email: str,
    service: UserService = Depends()
):
    return service.get_user_by_email(email)
