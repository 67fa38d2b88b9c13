import os

os.environ["TASKBOARD_DATABASE_URL"] = "sqlite://"

import boto3
import pytest
from botocore.client import Config
from botocore.stub import Stubber
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import db.models  # noqa: F401
from db.session import Base, get_db
from main import app
import services.storage as storage_service
from schemas.user import UserCreate, UserRoleUpdate
from services.project import ProjectService
from services.team import TeamService
from services.user import UserService


@pytest.fixture(autouse=True)
def s3(monkeypatch):
    """ MinIO 대신 응답을 직접 지정하는 S3 클라이언트 (botocore Stubber) """
    client = boto3.client(
        "s3", endpoint_url="http://minio.test:9000",
        aws_access_key_id="test", aws_secret_access_key="test", region_name="us-east-1",
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"})
    )
    monkeypatch.setattr(storage_service, "get_s3_client", lambda: client)
    with Stubber(client) as stubber:
        yield stubber


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def api(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db_session):
    """ 팀 'Core' 를 가진 admin """
    users = UserService(db_session)
    users.create_or_get_user(UserCreate(identity="admin-1", email="admin@example.com", name="Ada"))
    return users.update_user_role(UserRoleUpdate(identity="admin-1", role="admin", team_name="Core"))


@pytest.fixture
def team_id(admin):
    return admin.team_id


@pytest.fixture
def make_member(db_session, team_id):
    """ identity 로 가입한 뒤 이메일로 팀에 추가된 employee 를 만듭니다. """
    users = UserService(db_session)
    teams = TeamService(db_session)

    def _make(name: str):
        email = f"{name.lower()}@example.com"
        users.create_or_get_user(UserCreate(identity=f"id-{name.lower()}", email=email, name=name))
        user_id = teams.add_member_by_email(email, team_id)
        return users.user_repo.get_user_by_id(user_id)

    return _make


@pytest.fixture
def project(db_session, team_id):
    return ProjectService(db_session).create_project("Launch", team_id)
