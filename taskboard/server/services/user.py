import logging
from sqlalchemy.orm import Session
from fastapi import Depends
from repositories.user import UserRepository
from repositories.team import TeamRepository
from schemas.user import UserCreate, UserRoleUpdate
from routers.deps import CallerContext
from db.models import User
from db.session import get_db, atomic
from exceptions import NotFoundError, UnauthorizedError
from typing import Optional

logger = logging.getLogger(__name__)


class UserService:
    """ 외부 인증 식별자와 내부 User 레코드를 연결합니다. """

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.user_repo = UserRepository(db)
        self.team_repo = TeamRepository(db)

    def create_or_get_user(self, user_create: UserCreate) -> User:
        """ 식별자로 사용자를 찾고, 없으면 역할/팀 없이 새로 만듭니다. """
        existing_user = self.user_repo.get_user_by_identity(user_create.identity)
        if existing_user:
            return existing_user

        with atomic(self.db):
            db_user = self.user_repo.add_user(
                identity=user_create.identity,
                email=user_create.email,
                name=user_create.name,
            )
        logger.info(f"Created user {db_user.id} for identity {user_create.identity}")
        return db_user

    def update_user_role(self, role_update: UserRoleUpdate) -> User:
        """
        역할을 지정합니다.
        admin 이면서 팀 이름이 주어지면 새 팀을 만들고 팀 참조도 함께 설정합니다.
        그 외에는 역할만 바꾸고 기존 팀 참조는 그대로 둡니다.
        """
        user = self.user_repo.get_user_by_identity(role_update.identity)
        if not user:
            logger.warning(f"Failed to update role. User not found for identity: {role_update.identity}")
            raise NotFoundError("User not found")

        with atomic(self.db):
            if role_update.role == "admin" and role_update.team_name:
                team = self.team_repo.add_team(name=role_update.team_name, admin_id=user.id)
                user.team_id = team.id
                logger.info(f"Created team {team.id} ('{team.name}') for admin {user.id}")
            user.role = role_update.role

        self.db.refresh(user)
        return user

    def get_current_user(self, identity: Optional[str] = None) -> Optional[User]:
        """ 식별자가 없거나 모르는 식별자면 None (아직 로그인 전으로 간주) """
        if not identity:
            return None
        return self.user_repo.get_user_by_identity(identity)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.user_repo.get_user_by_email(email)

    def resolve_caller(self, caller: CallerContext) -> User:
        """ 호출자 컨텍스트를 내부 User 로 변환합니다. 인증되지 않았으면 Unauthorized. """
        if not caller.is_authenticated:
            logger.warning("Rejected unauthenticated call")
            raise UnauthorizedError("Unauthenticated", authenticated=False)

        user = self.user_repo.get_user_by_identity(caller.identity)
        if not user:
            logger.warning(f"Rejected call from unknown identity: {caller.identity}")
            raise UnauthorizedError("Unauthorized")
        return user
