import logging
import uuid
from functools import lru_cache
import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from utils.timestamps import now_ms
from typing import Iterable, List, Optional, Tuple
import config

logger = logging.getLogger(__name__)


@lru_cache
def get_s3_client():
    """ MinIO(S3 호환) 클라이언트. 프로세스당 하나를 재사용합니다. """
    return boto3.client(
        's3', endpoint_url=config.MINIO_ENDPOINT_URL,
        aws_access_key_id=config.MINIO_ACCESS_KEY,
        aws_secret_access_key=config.MINIO_SECRET_KEY, use_ssl=False,
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"})
    )


class StorageService:
    """
    이미지 첨부용 파일 저장소 (MinIO 버킷).
    업로드는 2단계입니다: 새 객체 키에 대한 presigned PUT URL 발급 -> 클라이언트가 바이트를 직접 전송.
    storage_id 는 객체 키이며, 다운로드 URL은 만료 시각이 붙은 presigned GET URL입니다.
    """

    def __init__(self):
        self.s3 = get_s3_client()
        self.bucket = config.MINIO_BUCKET

    def ensure_bucket(self) -> None:
        """ 버킷이 없으면 만듭니다. (서버 시작 시 1회) """
        try:
            self.s3.head_bucket(Bucket=self.bucket)
        except ClientError:
            self.s3.create_bucket(Bucket=self.bucket)
            logger.info(f"Created bucket {self.bucket}")

    def generate_upload_url(self) -> Tuple[str, str, int]:
        """ (업로드 URL, storage_id, 만료 시각 ms) """
        storage_id = uuid.uuid4().hex
        upload_url = self.s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": storage_id},
            ExpiresIn=config.UPLOAD_URL_TTL,
        )
        expires_at = now_ms() + config.UPLOAD_URL_TTL * 1000
        logger.info(f"Issued upload URL for {storage_id}")
        return upload_url, storage_id, expires_at

    def get_url(self, storage_id: str) -> Optional[str]:
        """ 임시 다운로드 URL. 객체가 없으면 None. """
        try:
            self.s3.head_object(Bucket=self.bucket, Key=storage_id)
        except ClientError:
            return None
        return self.s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": storage_id},
            ExpiresIn=config.DOWNLOAD_URL_TTL,
        )

    def get_urls(self, storage_ids: Iterable[str]) -> List[str]:
        """ 변환에 실패한 항목은 제외합니다. """
        urls = (self.get_url(storage_id) for storage_id in storage_ids)
        return [url for url in urls if url is not None]


def ensure_bucket() -> None:
    try:
        StorageService().ensure_bucket()
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to prepare bucket {config.MINIO_BUCKET}: {e}", exc_info=True)
