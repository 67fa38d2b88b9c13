from sqlalchemy.orm import Session
from db.models import Task, TaskNote
from typing import List, Optional


class TaskRepository:
    """ Task 모델에 대한 데이터베이스 CRUD 연산을 담당합니다. """

    def __init__(self, db: Session):
        self.db = db

    def get_task_by_id(self, task_id: int) -> Optional[Task]:
        """ ID로 Task 1개 조회 """
        return self.db.query(Task).filter(Task.id == task_id).first()

    def get_tasks_by_project(self, project_id: int) -> List[Task]:
        """ 프로젝트의 모든 Task (최신순) """
        return (
            self.db.query(Task)
            .filter(Task.project_id == project_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .all()
        )

    def get_tasks_by_legacy_assignee(self, user_id: int) -> List[Task]:
        """ 구버전 assigned_to 필드로 배정된 Task 조회 """
        return self.db.query(Task).filter(Task.assigned_to == user_id).all()

    def get_tasks_in_assignees(self, user_id: int) -> List[Task]:
        """
        assignees 목록에 user_id 가 포함된 Task 조회.
        JSON 목록 컬럼이라 DB 종류와 무관하게 애플리케이션에서 걸러냅니다.
        """
        return [
            task for task in self.db.query(Task).all()
            if user_id in (task.assignees or [])
        ]

    def add_task(self, **fields) -> Task:
        db_task = Task(**fields)
        self.db.add(db_task)
        self.db.flush()
        return db_task

    def add_note(self, task: Task, **fields) -> TaskNote:
        """ 작업 이력에 노트를 추가합니다. (기존 이력은 수정하지 않음) """
        note = TaskNote(**fields)
        task.notes.append(note)
        self.db.flush()
        return note

    def delete_task(self, task: Task) -> None:
        self.db.delete(task)
        self.db.flush()
