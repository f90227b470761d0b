from pydantic import BaseModel


class BucketResponse(BaseModel):
    ok: bool
    bucket: str


class UploadResponse(BaseModel):
    ok: bool
    bucket: str
    object_key: str
    file_url: str
    original_name: str
    content_type: str


class DownloadUrlResponse(BaseModel):
    object_key: str
    url: str
    expires_in: int
