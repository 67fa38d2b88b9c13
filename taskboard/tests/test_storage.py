import logging
from urllib.parse import parse_qs, urlparse

import config
from services.storage import StorageService, ensure_bucket
from utils.timestamps import now_ms


def _object(key):
    return {"Bucket": config.MINIO_BUCKET, "Key": key}


def test_upload_url_is_presigned_put_for_a_fresh_key():
    storage = StorageService()
    upload_url, storage_id, expires_at = storage.generate_upload_url()
    _, other_id, _ = storage.generate_upload_url()

    assert storage_id != other_id
    parsed = urlparse(upload_url)
    assert parsed.path == f"/{config.MINIO_BUCKET}/{storage_id}"
    query = parse_qs(parsed.query)
    assert query["X-Amz-Expires"] == [str(config.UPLOAD_URL_TTL)]
    assert "X-Amz-Signature" in query
    assert expires_at > now_ms()


def test_get_url_signs_existing_object(s3):
    s3.add_response("head_object", {"ContentType": "image/png", "ContentLength": 4}, _object("abc123"))

    url = StorageService().get_url("abc123")

    parsed = urlparse(url)
    assert parsed.path == f"/{config.MINIO_BUCKET}/abc123"
    assert parse_qs(parsed.query)["X-Amz-Expires"] == [str(config.DOWNLOAD_URL_TTL)]
    s3.assert_no_pending_responses()


def test_get_url_is_none_for_missing_object(s3):
    s3.add_client_error("head_object", service_error_code="404", http_status_code=404,
                        expected_params=_object("does-not-exist"))

    assert StorageService().get_url("does-not-exist") is None


def test_get_urls_drops_missing_objects(s3):
    s3.add_response("head_object", {}, _object("kept"))
    s3.add_client_error("head_object", service_error_code="404", http_status_code=404)

    urls = StorageService().get_urls(["kept", "gone"])

    assert [urlparse(url).path for url in urls] == [f"/{config.MINIO_BUCKET}/kept"]


def test_ensure_bucket_creates_missing_bucket(s3):
    s3.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
    s3.add_response("create_bucket", {}, {"Bucket": config.MINIO_BUCKET})

    ensure_bucket()

    s3.assert_no_pending_responses()


def test_ensure_bucket_logs_when_storage_is_unavailable(s3, caplog):
    s3.add_client_error("head_bucket", service_error_code="403", http_status_code=403)
    s3.add_client_error("create_bucket", service_error_code="AccessDenied", http_status_code=403)

    with caplog.at_level(logging.ERROR):
        ensure_bucket()

    assert "Failed to prepare bucket" in caplog.text
