from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone

# --- Pydantic Models for Requests/Responses ---

class ABTestCreate(BaseModel):
    """
    Schema for creating a new test via POST /tests.
    Fields are optional here so a missing value reaches the registry and is
    reported as a 400 with an {error} body instead of FastAPI's 422.
    """
    name: str | None = None
    description: str | None = None
    variation_a: str | None = Field(default=None, alias="variationA", description="HTML shown for variation A.")
    variation_b: str | None = Field(default=None, alias="variationB", description="HTML shown for variation B.")

    class Config:
        populate_by_name = True


class ABTestView(BaseModel):
    """A stored test plus the URLs and snippet needed to embed it."""
    id: str
    name: str
    description: str | None = None
    variation_a: str = Field(..., alias="variationA")
    variation_b: str = Field(..., alias="variationB")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")
    embed_url: str = Field(..., alias="embedUrl")
    analytics_url: str = Field(..., alias="analyticsUrl")
    embed_code: str = Field(..., alias="embedCode")

    class Config:
        from_attributes = True
        populate_by_name = True

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        # SQLite hands back naive values, they are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
