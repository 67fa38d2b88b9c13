import uvicorn
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers.user import router as user_router
from routers.team import router as team_router
from routers.project import router as project_router
from routers.task import router as task_router
from routers.storage import router as storage_router
from db.session import create_tables
from services.storage import ensure_bucket

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Taskboard API",
    description="Teams, projects, tasks, assignment and completion history.",
    version="1.0.0"
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
def on_startup():
    """ 애플리케이션이 시작될 때 DB 테이블과 첨부 파일 버킷을 준비합니다. """
    create_tables() # db/session.py
    ensure_bucket() # services/storage.py


app.include_router(user_router)
app.include_router(team_router)
app.include_router(project_router)
app.include_router(task_router)
app.include_router(storage_router)

@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the Taskboard API. Visit /docs for API documentation."}

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8888, reload=True)
