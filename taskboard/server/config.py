import os

DB_USER = os.getenv("TASKBOARD_DB_USER", "taskboard_user")
DB_PASSWORD = os.getenv("TASKBOARD_DB_PASSWORD", "taskboard_pw")
DB_HOST = os.getenv("TASKBOARD_DB_HOST", "taskboard_db")
DB_NAME = os.getenv("TASKBOARD_DB_NAME", "taskboard_db")

# PostgreSQL 연결 문자열 (TASKBOARD_DATABASE_URL 이 있으면 우선)
DATABASE_URL = os.getenv(
    "TASKBOARD_DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}/{DB_NAME}"
)

# 이미지 첨부용 MinIO (S3 호환) 버킷
MINIO_BUCKET = os.getenv("MINIO_BUCKET", "taskboard-files")
MINIO_ENDPOINT_URL = os.getenv("MINIO_ENDPOINT_URL", "http://minio:9000")
MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "taskboard")
MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "taskboard-secret")

UPLOAD_URL_TTL = int(os.getenv("TASKBOARD_UPLOAD_URL_TTL", "3600"))
DOWNLOAD_URL_TTL = int(os.getenv("TASKBOARD_DOWNLOAD_URL_TTL", "3600"))

PENDING_IDENTITY_PREFIX = "pending_"
