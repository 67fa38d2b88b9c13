from fastapi import APIRouter, Depends
from typing import List, Optional
from schemas.project import ProjectSchema, ProjectCreate
from schemas.task import ProjectTaskSchema
from services.project import ProjectService
from services.task_query import TaskQueryService

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post("", response_model=ProjectSchema, status_code=201, summary="프로젝트 생성")
async def create_project(
    project_data: ProjectCreate,
    service: ProjectService = Depends()
):
    return service.create_project(project_data.name, project_data.team_id)


@router.get("", response_model=List[ProjectSchema], summary="팀의 프로젝트 목록 (최신순)")
async def get_projects(
    team_id: Optional[int] = None,
    service: ProjectService = Depends()
):
    return service.get_projects(team_id)


@router.get("/{project_id}", response_model=Optional[ProjectSchema], summary="프로젝트 조회")
async def get_project(
    project_id: int,
    service: ProjectService = Depends()
):
    return service.get_project(project_id)


@router.get("/{project_id}/tasks", response_model=List[ProjectTaskSchema], summary="프로젝트의 작업 목록")
async def get_tasks_by_project(
    project_id: int,
    service: TaskQueryService = Depends()
):
    return service.get_tasks_by_project(project_id)


@router.delete("/{project_id}", status_code=204, summary="프로젝트 삭제 (작업 포함)")
async def delete_project(
    project_id: int,
    service: ProjectService = Depends()
):
    service.delete_project(project_id)
