from sqlalchemy.orm import Session
from db.models import Team
from typing import Optional


class TeamRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_team_by_id(self, team_id: int) -> Optional[Team]:
        return self.db.query(Team).filter(Team.id == team_id).first()

    def add_team(self, name: str, admin_id: int) -> Team:
        db_team = Team(name=name, admin_id=admin_id)
        self.db.add(db_team)
        self.db.flush()
        return db_team
