from fastapi import APIRouter, Depends
from typing import List, Optional
from schemas.task import (
    TaskSchema,
    TaskCreate,
    TaskAssign,
    TaskComplete,
    TaskReopen,
    TaskComment,
    MyTaskSchema,
    AdminTaskSchema,
    PerformanceSummary,
)
from services.task import TaskService
from services.task_query import TaskQueryService, TaskFilters
from routers.deps import CallerContext, get_caller

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.post("", response_model=TaskSchema, status_code=201, summary="새 Task 생성")
async def create_task(
    task_data: TaskCreate,
    service: TaskService = Depends()
):
    """
    assignees 와 구버전 assigned_to 를 모두 받을 수 있습니다.
    assigned_to 가 assignees 에 없으면 목록 뒤에 추가됩니다.
    """
    return service.create_task(task_data)


@router.get("/mine", response_model=List[MyTaskSchema], summary="내게 배정된 Task 조회")
async def get_my_tasks(
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    project_id: Optional[int] = None,
    date_from: Optional[int] = None,
    date_to: Optional[int] = None,
    service: TaskQueryService = Depends()
):
    filters = TaskFilters(project_id=project_id, date_from=date_from, date_to=date_to, search=search)
    return service.get_my_tasks(user_id, filters)


@router.get("/admin", response_model=List[AdminTaskSchema], summary="팀 전체 Task 조회 (관리자)")
async def get_all_tasks_for_admin(
    team_id: Optional[int] = None,
    project_id: Optional[int] = None,
    assigned_to: Optional[int] = None,
    completed_by: Optional[int] = None,
    date_from: Optional[int] = None,
    date_to: Optional[int] = None,
    service: TaskQueryService = Depends()
):
    filters = TaskFilters(
        project_id=project_id,
        assignee_id=assigned_to,
        completed_by=completed_by,
        date_from=date_from,
        date_to=date_to,
    )
    return service.get_all_tasks_for_admin(team_id, filters)


@router.get("/admin/performance", response_model=PerformanceSummary, summary="완료 실적 요약 (관리자)")
async def get_performance(
    team_id: Optional[int] = None,
    completed_by: Optional[int] = None,
    date_from: Optional[int] = None,
    date_to: Optional[int] = None,
    service: TaskQueryService = Depends()
):
    filters = TaskFilters(completed_by=completed_by, date_from=date_from, date_to=date_to)
    return service.get_performance(team_id, filters)


@router.put("/{task_id}/assignees", response_model=TaskSchema, summary="담당자 지정")
async def assign_task(
    task_id: int,
    assignment: TaskAssign,
    service: TaskService = Depends()
):
    return service.assign_task(task_id, assignment.assignees, assignment.user_id)


@router.post("/{task_id}/done", response_model=TaskSchema, summary="완료 처리")
async def mark_task_done(
    task_id: int,
    completion: TaskComplete,
    service: TaskService = Depends()
):
    return service.mark_task_done(task_id, completion.completed_by, completion.note)


@router.post("/{task_id}/pending", response_model=TaskSchema, summary="다시 진행 중으로")
async def mark_task_pending(
    task_id: int,
    reopen: TaskReopen,
    service: TaskService = Depends()
):
    return service.mark_task_pending(task_id, reopen.user_id, reopen.note)


@router.post("/{task_id}/notes", response_model=TaskSchema, status_code=201, summary="코멘트 추가")
async def add_task_comment(
    task_id: int,
    comment: TaskComment,
    service: TaskService = Depends()
):
    return service.add_comment(task_id, comment.user_id, comment.content, comment.images)


@router.delete("/{task_id}", status_code=204, summary="Task 삭제 (관리자)")
async def delete_task(
    task_id: int,
    caller: CallerContext = Depends(get_caller),
    service: TaskService = Depends()
):
    service.delete_task(caller, task_id)
