from sqlalchemy.orm import Session
from db.models import User
from typing import Dict, Iterable, List, Optional


class UserRepository:
    """ User 모델에 대한 데이터베이스 CRUD 연산을 담당합니다. """

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """ ID로 사용자 1명 조회 """
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_identity(self, identity: str) -> Optional[User]:
        """ 외부 인증 식별자로 사용자 1명 조회 """
        return self.db.query(User).filter(User.identity == identity).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        """ 이메일로 사용자 1명 조회 (대소문자 구분, 정확히 일치). 여러 명이면 가장 먼저 만든 사용자 """
        return self.db.query(User).filter(User.email == email).order_by(User.id).first()

    def get_users_by_ids(self, user_ids: Iterable[int]) -> Dict[int, User]:
        """ 여러 ID를 한 번에 조회하여 {id: User} 로 반환 """
        ids = {user_id for user_id in user_ids if user_id is not None}
        if not ids:
            return {}
        users = self.db.query(User).filter(User.id.in_(ids)).all()
        return {user.id: user for user in users}

    def get_users_by_team(self, team_id: int) -> List[User]:
        return self.db.query(User).filter(User.team_id == team_id).order_by(User.id).all()

    def add_user(self, **fields) -> User:
        db_user = User(**fields)
        self.db.add(db_user)
        self.db.flush()
        return db_user
