from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from config import DATABASE_URL

engine = create_engine(
    DATABASE_URL
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables():
    import db.models  # noqa: F401  (모델 등록)
    Base.metadata.create_all(bind=engine)


def get_db() -> Session: # type: ignore
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    하나의 mutation 을 하나의 트랜잭션으로 묶습니다.
    블록이 정상 종료되면 commit, 예외가 나면 rollback 후 다시 던집니다.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
