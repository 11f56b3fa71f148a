"""Pydantic request/response schemas for API endpoints."""

from board_access.schemas.activation import ActivateResponse, SessionInfo

__all__ = [
    "ActivateResponse",
    "SessionInfo",
]
