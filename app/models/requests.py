"""
Pydantic models for incoming requests
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScanRequest(BaseModel):
    """Ticket scan request"""
    image: str = Field(
        ...,
        description="Ticket photo in base64 (jpeg, png or webp)",
        min_length=16
    )
    user_id: Optional[str] = Field(
        None,
        description="Owner of the scan, used for the scan history",
        max_length=128
    )

    @field_validator('image')
    @classmethod
    def validate_image_not_empty(cls, v: str) -> str:
        """Image must not be blank"""
        if not v or not v.strip():
            raise ValueError("Image cannot be empty")
        return v.strip()

    @field_validator('user_id')
    @classmethod
    def blank_user_as_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "image": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg==",
                "user_id": "user-42"
            }
        }
    )
