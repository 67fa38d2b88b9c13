from fastapi import APIRouter, Depends
from typing import List, Optional
from schemas.team import TeamSchema, MemberInvite, MemberAdded
from schemas.user import UserSchema
from services.team import TeamService
from routers.deps import CallerContext, get_caller

router = APIRouter(prefix="/teams", tags=["Teams"])


@router.get("", response_model=Optional[TeamSchema], summary="팀 조회")
async def get_team(
    team_id: Optional[int] = None,
    service: TeamService = Depends()
):
    return service.get_team(team_id)


@router.get("/members", response_model=List[UserSchema], summary="팀원 목록")
async def get_team_members(
    team_id: Optional[int] = None,
    service: TeamService = Depends()
):
    return service.get_team_members(team_id)


@router.post("/{team_id}/members", response_model=MemberAdded, status_code=201, summary="이메일로 팀원 추가")
async def add_member_by_email(
    team_id: int,
    invite: MemberInvite,
    service: TeamService = Depends()
):
    """ 가입 전인 이메일이면 pending 상태의 임시 사용자가 만들어집니다. """
    return MemberAdded(user_id=service.add_member_by_email(invite.email, team_id))


@router.delete("/members/{user_id}", status_code=204, summary="팀원 제외")
async def remove_member(
    user_id: int,
    caller: CallerContext = Depends(get_caller),
    service: TeamService = Depends()
):
    service.remove_member(caller, user_id)
