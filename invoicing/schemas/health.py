"""
Health check endpoint schemas.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for GET /health."""

    status: str = Field(
        default="ok",
        description="Health status of the API (always 'ok' if responding)",
        examples=["ok"]
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "ok"
            }
        }
    }
