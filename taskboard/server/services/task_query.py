import logging
from dataclasses import dataclass
from datetime import datetime
from sqlalchemy.orm import Session
from fastapi import Depends
from repositories.task import TaskRepository
from repositories.project import ProjectRepository
from repositories.user import UserRepository
from services.storage import StorageService
from schemas.task import (
    AdminTaskSchema,
    MyTaskSchema,
    PerformanceSummary,
    ProjectTaskSchema,
)
from schemas.project import ProjectSchema
from schemas.user import UserSchema
from db.models import Task
from db.session import get_db
from utils.timestamps import start_of_day_ms, days_ago_ms, to_datetime
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class TaskFilters:
    """ 세 가지 조회 경로가 공유하는 필터 조건. None 이면 적용하지 않습니다. """
    project_id: Optional[int] = None
    assignee_id: Optional[int] = None
    completed_by: Optional[int] = None
    date_from: Optional[int] = None
    date_to: Optional[int] = None
    search: Optional[str] = None


def is_assigned(task: Task, user_id: int) -> bool:
    """ 구버전 assigned_to 와 assignees 목록을 모두 확인합니다. """
    return task.assigned_to == user_id or user_id in (task.assignees or [])


def apply_filters(tasks: Iterable[Task], filters: TaskFilters) -> List[Task]:
    """ 프로젝트 -> 담당자 -> 완료자 -> 생성일 하한 -> 생성일 상한 순서로 거릅니다. """
    result = list(tasks)
    if filters.project_id is not None:
        result = [t for t in result if t.project_id == filters.project_id]
    if filters.assignee_id is not None:
        result = [t for t in result if is_assigned(t, filters.assignee_id)]
    if filters.completed_by is not None:
        result = [t for t in result if t.completed_by == filters.completed_by]
    if filters.date_from is not None:
        result = [t for t in result if t.created_at >= filters.date_from]
    if filters.date_to is not None:
        result = [t for t in result if t.created_at <= filters.date_to]
    return result


def newest_first(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: (t.created_at, t.id), reverse=True)


def _user(users: Dict[int, object], user_id: Optional[int]) -> Optional[UserSchema]:
    if user_id is None or user_id not in users:
        return None
    return UserSchema.model_validate(users[user_id])


class TaskQueryService:
    """ 작업 조회 (프로젝트별 / 내 작업 / 관리자 전체) 와 관련 레코드 결합. """

    def __init__(self, db: Session = Depends(get_db)):
        self.task_repo = TaskRepository(db)
        self.project_repo = ProjectRepository(db)
        self.user_repo = UserRepository(db)
        self.storage = StorageService()

    def get_tasks_by_project(self, project_id: int) -> List[ProjectTaskSchema]:
        tasks = self.task_repo.get_tasks_by_project(project_id)
        users = self.user_repo.get_users_by_ids(t.assigned_to for t in tasks)
        return [
            ProjectTaskSchema.model_validate(task).model_copy(
                update={"assigned_user": _user(users, task.assigned_to)}
            )
            for task in tasks
        ]

    def get_my_tasks(self, user_id: Optional[int], filters: Optional[TaskFilters] = None) -> List[MyTaskSchema]:
        """
        내게 배정된 작업. assignees 포함 또는 구버전 assigned_to 일치 모두 찾고 중복 제거합니다.
        user_id 가 없으면 빈 목록 (전체 작업을 돌려주지 않음).
        """
        if user_id is None:
            return []
        filters = filters or TaskFilters()

        merged = {t.id: t for t in self.task_repo.get_tasks_in_assignees(user_id)}
        for task in self.task_repo.get_tasks_by_legacy_assignee(user_id):
            merged[task.id] = task
        tasks = newest_first(merged.values())

        tasks = apply_filters(
            tasks,
            TaskFilters(
                project_id=filters.project_id,
                date_from=filters.date_from,
                date_to=filters.date_to,
            ),
        )

        projects = self.project_repo.get_projects_by_ids(t.project_id for t in tasks)
        enriched = []
        for task in tasks:
            project = projects.get(task.project_id)
            enriched.append(
                MyTaskSchema.model_validate(task).model_copy(
                    update={"project": ProjectSchema.model_validate(project) if project else None}
                )
            )

        if filters.search:
            query = filters.search.lower()
            enriched = [
                t for t in enriched
                if query in t.title.lower() or (t.project is not None and query in t.project.name.lower())
            ]
        return enriched

    def get_all_tasks_for_admin(self, team_id: Optional[int], filters: Optional[TaskFilters] = None) -> List[AdminTaskSchema]:
        if not team_id:
            return []
        filters = filters or TaskFilters()

        projects = {}
        tasks: List[Task] = []
        for project in self.project_repo.get_projects_by_team(team_id):
            if filters.project_id is not None and project.id != filters.project_id:
                continue
            projects[project.id] = project
            tasks.extend(self.task_repo.get_tasks_by_project(project.id))

        tasks = apply_filters(
            tasks,
            TaskFilters(
                assignee_id=filters.assignee_id,
                completed_by=filters.completed_by,
                date_from=filters.date_from,
                date_to=filters.date_to,
            ),
        )
        tasks = newest_first(tasks)

        user_ids = set()
        for task in tasks:
            user_ids.update(task.assignees or [])
            user_ids.update((task.assigned_to, task.created_by, task.completed_by))
        users = self.user_repo.get_users_by_ids(user_ids)

        return [self._enrich_for_admin(task, projects[task.project_id], users) for task in tasks]

    def _enrich_for_admin(self, task: Task, project, users: Dict[int, object]) -> AdminTaskSchema:
        assigned_user = _user(users, task.assigned_to)
        if task.assignees:
            assignees_list = [_user(users, user_id) for user_id in task.assignees]
        elif assigned_user:
            assignees_list = [assigned_user]
        else:
            assignees_list = []

        return AdminTaskSchema.model_validate(task).model_copy(
            update={
                "project": ProjectSchema.model_validate(project),
                "assigned_user": assigned_user,
                "assignees_list": [u for u in assignees_list if u is not None],
                "created_by_user": _user(users, task.created_by),
                "completed_by_user": _user(users, task.completed_by),
                "image_urls": self.storage.get_urls(task.images or []),
            }
        )

    def get_performance(
        self,
        team_id: Optional[int],
        filters: Optional[TaskFilters] = None,
        now: Optional[datetime] = None,
    ) -> PerformanceSummary:
        """ 완료 실적 요약: 전체 / 오늘 / 최근 7일, 완료일별 묶음 """
        now = now or datetime.now()
        tasks = self.get_all_tasks_for_admin(team_id, filters)
        completed = [t for t in tasks if t.status == "done" and t.completed_at]

        today_start = start_of_day_ms(now)
        week_start = days_ago_ms(7, now)

        by_day: Dict[str, List[AdminTaskSchema]] = {}
        for task in completed:
            day = to_datetime(task.completed_at).strftime("%Y-%m-%d")
            by_day.setdefault(day, []).append(task)

        return PerformanceSummary(
            total=len(completed),
            today=len([t for t in completed if t.completed_at >= today_start]),
            week=len([t for t in completed if t.completed_at >= week_start]),
            by_day=by_day,
        )
