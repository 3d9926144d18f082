from pydantic import BaseModel


class ImageUploadResponse(BaseModel):
    """Schema returned by POST /upload."""
    key: str
    url: str
