import logging
from sqlalchemy.orm import Session
from fastapi import Depends
from repositories.user import UserRepository
from repositories.team import TeamRepository
from routers.deps import CallerContext
from services.user import UserService
from db.models import Team, User
from db.session import get_db, atomic
from exceptions import NotFoundError, UnauthorizedError, InvalidStateError
from config import PENDING_IDENTITY_PREFIX
from typing import List, Optional

logger = logging.getLogger(__name__)


class TeamService:
    """ 팀 조회와 멤버 초대/제거를 담당합니다. """

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.user_repo = UserRepository(db)
        self.team_repo = TeamRepository(db)
        self.users = UserService(db)

    def get_team(self, team_id: Optional[int] = None) -> Optional[Team]:
        if not team_id:
            return None
        return self.team_repo.get_team_by_id(team_id)

    def get_team_members(self, team_id: Optional[int] = None) -> List[User]:
        if not team_id:
            return []
        return self.user_repo.get_users_by_team(team_id)

    def add_member_by_email(self, email: str, team_id: int) -> int:
        """
        이메일로 팀원을 추가합니다.
        - 가입된 사용자가 있으면 팀을 옮기고, 역할이 없을 때만 employee 로 지정합니다.
        - 없으면 "pending_<email>" 식별자의 임시 사용자를 만듭니다.
        어느 경우든 사용자 ID를 반환합니다.
        """
        if not self.team_repo.get_team_by_id(team_id):
            logger.warning(f"Failed to add member {email}. Team not found for ID: {team_id}")
            raise NotFoundError("Team not found")

        user = self.user_repo.get_user_by_email(email)

        with atomic(self.db):
            if user:
                user.team_id = team_id
                user.role = user.role or "employee"
                logger.info(f"Moved existing user {user.id} ({email}) into team {team_id}")
            else:
                user = self.user_repo.add_user(
                    identity=f"{PENDING_IDENTITY_PREFIX}{email}",
                    email=email,
                    role="employee",
                    team_id=team_id,
                )
                logger.info(f"Invited pending user {user.id} ({email}) to team {team_id}")

        return user.id

    def remove_member(self, caller: CallerContext, user_id: int) -> None:
        """ 호출자(같은 팀의 admin)가 팀원을 팀에서 제외합니다. User 레코드는 남습니다. """
        current_user = self.users.resolve_caller(caller)
        if current_user.role != "admin" or not current_user.team_id:
            logger.warning(f"User {current_user.id} is not a team admin. Cannot remove member {user_id}")
            raise UnauthorizedError("Unauthorized")

        user_to_remove = self.user_repo.get_user_by_id(user_id)
        if not user_to_remove:
            logger.warning(f"Failed to remove member. User not found for ID: {user_id}")
            raise NotFoundError("User not found")

        if user_to_remove.team_id != current_user.team_id:
            logger.warning(
                f"Admin {current_user.id} tried to remove user {user_id} "
                f"from team {user_to_remove.team_id}"
            )
            raise InvalidStateError("User is not in your team")

        with atomic(self.db):
            user_to_remove.team_id = None
        logger.info(f"Removed user {user_id} from team {current_user.team_id}")
