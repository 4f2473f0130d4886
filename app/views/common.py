"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    detail: str = Field(..., description="User-facing error message")
    code: Optional[str] = Field(None, description="Stable machine-readable error kind")
