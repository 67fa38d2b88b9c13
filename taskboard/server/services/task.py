import logging
from sqlalchemy.orm import Session
from fastapi import Depends
from repositories.task import TaskRepository
from repositories.project import ProjectRepository
from routers.deps import CallerContext
from services.user import UserService
from schemas.task import TaskCreate
from db.models import Task
from db.session import get_db, atomic
from exceptions import NotFoundError, UnauthorizedError, InvalidStateError
from utils.timestamps import now_ms
from typing import List, Optional

logger = logging.getLogger(__name__)


def reconcile_assignees(assignees: Optional[List[int]], user_id: Optional[int]) -> List[int]:
    """
    담당자 목록 정리 규칙 (생성/배정 공통).
    assignees 를 기준으로 하고, 단일 담당자(user_id)가 목록에 없으면 뒤에 붙입니다.
    """
    reconciled = list(assignees or [])
    if user_id is not None and user_id not in reconciled:
        reconciled.append(user_id)
    return reconciled


class TaskService:
    """ Task 생성, 상태 전이(pending <-> done), 배정, 삭제를 담당합니다. """

    def __init__(self, db: Session = Depends(get_db)):
        self.db = db
        self.task_repo = TaskRepository(db)
        self.project_repo = ProjectRepository(db)
        self.users = UserService(db)

    def _get_task_or_404(self, task_id: int) -> Task:
        task = self.task_repo.get_task_by_id(task_id)
        if not task:
            logger.warning(f"Task not found for ID: {task_id}")
            raise NotFoundError("Task not found")
        return task

    def create_task(self, task_create: TaskCreate) -> Task:
        """
        새 Task 는 항상 pending 으로 시작합니다.
        assigned_to 는 구버전 소비자를 위해 받은 값 그대로 저장합니다.
        """
        if not self.project_repo.get_project_by_id(task_create.project_id):
            logger.warning(f"Cannot create task. Project not found for ID: {task_create.project_id}")
            raise NotFoundError("Project not found")

        with atomic(self.db):
            task = self.task_repo.add_task(
                title=task_create.title,
                project_id=task_create.project_id,
                assigned_to=task_create.assigned_to,
                assignees=reconcile_assignees(task_create.assignees, task_create.assigned_to),
                created_by=task_create.created_by,
                images=task_create.images,
                status="pending",
                created_at=now_ms(),
            )
        logger.info(f"Created task {task.id} in project {task.project_id}")
        return task

    def assign_task(
        self,
        task_id: int,
        assignees: Optional[List[int]] = None,
        user_id: Optional[int] = None,
    ) -> Task:
        """
        담당자를 다시 지정합니다.
        user_id 가 없으면 목록의 첫 번째 사람이 대표 담당자(assigned_to)가 됩니다.
        """
        task = self._get_task_or_404(task_id)

        new_assignees = reconcile_assignees(assignees, user_id)
        new_assigned_to = user_id
        if new_assigned_to is None and new_assignees:
            new_assigned_to = new_assignees[0]

        with atomic(self.db):
            task.assignees = new_assignees
            task.assigned_to = new_assigned_to
        logger.info(f"Assigned task {task_id} to {new_assignees}")
        return task

    def mark_task_done(
        self,
        task_id: int,
        completed_by: Optional[int] = None,
        note: Optional[str] = None,
    ) -> Task:
        """ 완료 처리. 완료 메모는 덮어쓰고, 메모가 있으면 이력에 completion 노트를 추가합니다. """
        task = self._get_task_or_404(task_id)
        if note and completed_by is None:
            logger.warning(f"Rejected completion note without author on task {task_id}")
            raise InvalidStateError("A completion note requires completed_by")
        now = now_ms()

        with atomic(self.db):
            task.status = "done"
            task.completed_at = now
            task.completed_by = completed_by
            task.completion_note = note
            if note:
                self.task_repo.add_note(
                    task, content=note, user_id=completed_by, timestamp=now, type="completion"
                )
        logger.info(f"Task {task_id} marked done by {completed_by}")
        return task

    def mark_task_pending(
        self,
        task_id: int,
        user_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> Task:
        """
        다시 pending 으로 돌립니다. 완료 관련 필드는 모두 비웁니다.
        이력 노트는 메모와 작성자가 모두 있을 때만 남깁니다.
        """
        task = self._get_task_or_404(task_id)

        with atomic(self.db):
            task.status = "pending"
            task.completed_at = None
            task.completed_by = None
            task.completion_note = None
            if note and user_id is not None:
                self.task_repo.add_note(
                    task, content=note, user_id=user_id, timestamp=now_ms(), type="reopen"
                )
        logger.info(f"Task {task_id} reopened by {user_id}")
        return task

    def add_comment(
        self,
        task_id: int,
        user_id: int,
        content: str,
        images: Optional[List[str]] = None,
    ) -> Task:
        task = self._get_task_or_404(task_id)
        with atomic(self.db):
            self.task_repo.add_note(
                task, content=content, user_id=user_id, timestamp=now_ms(), type="comment", images=images
            )
        logger.info(f"User {user_id} commented on task {task_id}")
        return task

    def delete_task(self, caller: CallerContext, task_id: int) -> None:
        """ admin 만 삭제할 수 있습니다. """
        user = self.users.resolve_caller(caller)
        if user.role != "admin":
            logger.warning(f"User {user.id} is not an admin. Cannot delete task {task_id}")
            raise UnauthorizedError("Unauthorized: Only admins can delete tasks")

        task = self._get_task_or_404(task_id)
        with atomic(self.db):
            self.task_repo.delete_task(task)
        logger.info(f"Task {task_id} deleted by admin {user.id}")
