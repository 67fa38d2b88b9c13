from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from db.session import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    # 외부 인증 제공자의 식별자. 초대만 된 사용자는 "pending_<email>"
    identity = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, index=True, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=True)  # admin | employee
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True, index=True)


class Team(Base):
    __tablename__ = "teams"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    admin_id = Column(Integer, ForeignKey("users.id", use_alter=True, name="fk_teams_admin_id"), nullable=False)


class Project(Base):
    __tablename__ = "projects"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False, index=True)
    created_at = Column(BigInteger, nullable=False)


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    status = Column(String, nullable=False, default="pending")  # pending | done
    created_at = Column(BigInteger, nullable=False)

    # 구버전 단일 담당자 필드 (하위 호환용)와 현재의 담당자 목록
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    assignees = Column(JSON, nullable=False, default=list)

    completed_at = Column(BigInteger, nullable=True)
    completed_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    completion_note = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    images = Column(JSON, nullable=True)

    notes = relationship(
        "TaskNote",
        back_populates="task",
        order_by="TaskNote.id",
        cascade="all, delete-orphan",
    )


class TaskNote(Base):
    __tablename__ = "task_notes"
    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(BigInteger, nullable=False)
    type = Column(String, nullable=False)  # completion | reopen | comment
    images = Column(JSON, nullable=True)

    task = relationship("Task", back_populates="notes")
