"""
API request and response models for Harve Share REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
listings/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models only check that required fields are present and are strings
that can be encoded as UTF-8 (JSON admits lone surrogates, which neither
bcrypt nor the database can store). No format rules (email shape, password
strength) are applied.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from listings.models import DeleteResult, InsertResult, UpdateResult

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


def _require_utf8(value: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValueError("must be valid UTF-8 text") from None
    return value


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/register."""

    name: str
    email: str
    password: str

    @field_validator("name", "email", "password")
    @classmethod
    def require_utf8(cls, v: str) -> str:
        return _require_utf8(v)


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/login."""

    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def require_utf8(cls, v: str) -> str:
        return _require_utf8(v)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class RegisterResponse(BaseModel):
    success: bool = True
    message: str = "User registered successfully"


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str


# ---------------------------------------------------------------------------
# Listings -- request models
# ---------------------------------------------------------------------------


class PostUpdate(BaseModel):
    """Request body for PUT /api/v1/posts/{id}.

    Every field is optional. Only fields present in the request body are
    written; unknown fields are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    image: Optional[Any] = None
    category: Optional[Any] = None
    title: Optional[Any] = None
    quantity: Optional[Any] = None
    description: Optional[Any] = None


# ---------------------------------------------------------------------------
# Listings -- write acknowledgements
#
# Serialized with camelCase keys (insertedId, matchedCount, ...), the shape
# document-database drivers use for their write results.
# ---------------------------------------------------------------------------


class _WriteResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    acknowledged: bool = True


class InsertResultResponse(_WriteResult):
    inserted_id: str

    @classmethod
    def from_result(cls, result: InsertResult) -> "InsertResultResponse":
        return cls(acknowledged=result.acknowledged, inserted_id=result.inserted_id)


class UpdateResultResponse(_WriteResult):
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None
    upserted_count: int = 0

    @classmethod
    def from_result(cls, result: UpdateResult) -> "UpdateResultResponse":
        return cls(
            acknowledged=result.acknowledged,
            matched_count=result.matched_count,
            modified_count=result.modified_count,
            upserted_id=result.upserted_id,
            upserted_count=1 if result.upserted_id else 0,
        )


class DeleteResultResponse(_WriteResult):
    deleted_count: int

    @classmethod
    def from_result(cls, result: DeleteResult) -> "DeleteResultResponse":
        return cls(acknowledged=result.acknowledged, deleted_count=result.deleted_count)


class PostCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Post added successfully"
    data: InsertResultResponse


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Structured error body. code is a stable machine-readable identifier."""

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Envelope for every error response: {"success": false, "error": {...}}."""

    success: bool = False
    error: ErrorDetail


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class StatusResponse(BaseModel):
    """Response for GET /."""

    message: str = "Server is running smoothly"
    timestamp: datetime


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
