import logging
from sqlalchemy.orm import Session
from fastapi import Depends
from repositories.project import ProjectRepository
from repositories.task import TaskRepository
from db.models import Project
from db.session import get_db, atomic
from exceptions import NotFoundError
from utils.timestamps import now_ms
from typing import List, Optional

logger = logging.getLogger(__name__)


class ProjectService:

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.project_repo = ProjectRepository(db)
        self.task_repo = TaskRepository(db)

    def create_project(self, name: str, team_id: int) -> Project:
        """ 프로젝트 생성 (팀 내 이름 중복 허용) """
        with atomic(self.db):
            project = self.project_repo.add_project(name=name, team_id=team_id, created_at=now_ms())
        logger.info(f"Created project {project.id} ('{name}') in team {team_id}")
        return project

    def get_projects(self, team_id: Optional[int] = None) -> List[Project]:
        if not team_id:
            return []
        return self.project_repo.get_projects_by_team(team_id)

    def get_project(self, project_id: int) -> Optional[Project]:
        return self.project_repo.get_project_by_id(project_id)

    def delete_project(self, project_id: int) -> None:
        """ 프로젝트의 작업을 모두 지운 뒤 프로젝트를 지웁니다. (한 트랜잭션) """
        project = self.project_repo.get_project_by_id(project_id)
        if not project:
            logger.warning(f"Failed to delete project. Project not found for ID: {project_id}")
            raise NotFoundError("Project not found")

        with atomic(self.db):
            tasks = self.task_repo.get_tasks_by_project(project_id)
            for task in tasks:
                self.task_repo.delete_task(task)
            self.project_repo.delete_project(project)
        logger.info(f"Deleted project {project_id} with {len(tasks)} tasks")
