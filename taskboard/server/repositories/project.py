from sqlalchemy.orm import Session
from db.models import Project
from typing import Dict, Iterable, List, Optional


class ProjectRepository:
    """ Project 모델에 대한 데이터베이스 CRUD 연산을 담당합니다. """

    def __init__(self, db: Session):
        self.db = db

    def get_project_by_id(self, project_id: int) -> Optional[Project]:
        return self.db.query(Project).filter(Project.id == project_id).first()

    def get_projects_by_ids(self, project_ids: Iterable[int]) -> Dict[int, Project]:
        ids = set(project_ids)
        if not ids:
            return {}
        projects = self.db.query(Project).filter(Project.id.in_(ids)).all()
        return {project.id: project for project in projects}

    def get_projects_by_team(self, team_id: int) -> List[Project]:
        """ 팀의 모든 프로젝트 (최신순) """
        return (
            self.db.query(Project)
            .filter(Project.team_id == team_id)
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )

    def add_project(self, name: str, team_id: int, created_at: int) -> Project:
        db_project = Project(name=name, team_id=team_id, created_at=created_at)
        self.db.add(db_project)
        self.db.flush()
        return db_project

    def delete_project(self, project: Project) -> None:
        self.db.delete(project)
        self.db.flush()
