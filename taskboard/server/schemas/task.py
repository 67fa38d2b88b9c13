from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional

from schemas.project import ProjectSchema
from schemas.user import UserSchema

TaskStatus = Literal["pending", "done"]
NoteType = Literal["completion", "reopen", "comment"]


class TaskNoteSchema(BaseModel):
    content: str
    user_id: int
    timestamp: int
    type: NoteType
    images: Optional[List[str]] = None

    class Config:
        from_attributes = True


class TaskCreate(BaseModel):
    title: str
    project_id: int
    assigned_to: Optional[int] = None
    assignees: Optional[List[int]] = None
    created_by: Optional[int] = None
    images: Optional[List[str]] = None


class TaskAssign(BaseModel):
    assignees: Optional[List[int]] = None
    user_id: Optional[int] = None  # 구버전 단일 담당자 지정


class TaskComplete(BaseModel):
    completed_by: Optional[int] = None
    note: Optional[str] = None


class TaskReopen(BaseModel):
    user_id: Optional[int] = None
    note: Optional[str] = None


class TaskComment(BaseModel):
    user_id: int
    content: str = Field(min_length=1)
    images: Optional[List[str]] = None


class TaskSchema(BaseModel):
    id: int
    title: str
    project_id: int
    status: TaskStatus
    created_at: int
    assigned_to: Optional[int] = None
    assignees: List[int] = []
    completed_at: Optional[int] = None
    completed_by: Optional[int] = None
    completion_note: Optional[str] = None
    created_by: Optional[int] = None
    images: Optional[List[str]] = None
    notes: List[TaskNoteSchema] = []

    class Config:
        from_attributes = True


class ProjectTaskSchema(TaskSchema):
    """ 프로젝트별 조회: 구버전 단일 담당자 정보 포함 """
    assigned_user: Optional[UserSchema] = None


class MyTaskSchema(TaskSchema):
    """ 내 작업 조회: 소속 프로젝트 정보 포함 """
    project: Optional[ProjectSchema] = None


class AdminTaskSchema(TaskSchema):
    """ 관리자 전체 조회: 담당자/생성자/완료자/이미지 URL 포함 """
    project: Optional[ProjectSchema] = None
    assigned_user: Optional[UserSchema] = None
    assignees_list: List[UserSchema] = []
    created_by_user: Optional[UserSchema] = None
    completed_by_user: Optional[UserSchema] = None
    image_urls: List[str] = []


class PerformanceSummary(BaseModel):
    total: int
    today: int
    week: int
    # "YYYY-MM-DD" -> 그날 완료된 작업 목록
    by_day: Dict[str, List[AdminTaskSchema]] = {}
