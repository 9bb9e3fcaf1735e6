"""
Pydantic models for authentication.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LoginRequest(BaseModel):
    """Body of POST /auth/login."""

    password: str = Field(min_length=1, description="Shared access password")


class LoginResponse(BaseModel):
    """Successful login response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ok: bool = True
    token: str = Field(description="Signed session token")
    expires_in: int = Field(description="Token lifetime in seconds")
