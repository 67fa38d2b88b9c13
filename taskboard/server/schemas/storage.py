from pydantic import BaseModel


class UploadTargetSchema(BaseModel):
    upload_url: str
    storage_id: str
    expires_at: int
