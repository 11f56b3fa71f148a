"""Wire schemas for activation and session endpoints.

Field names on the wire are camelCase (clientId, expiresAt) to match the
browser client; Python attributes stay snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field


class ActivateResponse(BaseModel):
    """Body of a successful POST /activate."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    expires_at: int = Field(alias="expiresAt")
    expires_in: int = Field(alias="expiresIn")


class SessionInfo(BaseModel):
    """Verified claims of the caller's session token."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientId")
    code: str
    issued_at: int = Field(alias="issuedAt")
    expires_at: int = Field(alias="expiresAt")
