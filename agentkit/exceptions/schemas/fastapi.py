"""Error schema for API exceptions."""

from typing import Any

from pydantic import BaseModel, Field


class FastAPIErrorSchema(BaseModel):
    """Error response schema."""

    detail: str | None
    error_code: str
    additional_info: dict[str, Any] = Field(
        description="Additional computer-readable information.",
        examples=[{}],
    )
