from fastapi import APIRouter, Depends
from schemas.storage import UploadTargetSchema
from services.storage import StorageService
from services.user import UserService
from routers.deps import CallerContext, get_caller

router = APIRouter(prefix="/storage", tags=["Storage"])


@router.post("/upload-url", response_model=UploadTargetSchema, summary="업로드 URL 발급")
async def generate_upload_url(
    caller: CallerContext = Depends(get_caller),
    users: UserService = Depends(),
    service: StorageService = Depends()
):
    """ 발급된 URL로 이미지 바이트를 PUT 한 뒤, 응답의 storage_id 를 작업에 첨부합니다. """
    users.resolve_caller(caller)
    upload_url, storage_id, expires_at = service.generate_upload_url()
    return UploadTargetSchema(upload_url=upload_url, storage_id=storage_id, expires_at=expires_at)
