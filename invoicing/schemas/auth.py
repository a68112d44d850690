"""
Pydantic schemas for authentication endpoints.
"""

from pydantic import BaseModel, Field


class LoginFailedResponse(BaseModel):
    """
    Response for POST /auth/login when the credentials are rejected.
    """
    error: str = Field(
        ...,
        description="Short failure code",
        examples=["CredentialsSignin"]
    )
    details: str = Field(..., description="Human-readable message")
