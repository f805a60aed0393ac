"""
Notes API — Pydantic Request/Response Schemas
==============================================

What:  Pydantic models defining the API contract.
How:   FastAPI validates request bodies against the input models and
       serializes responses through the output models (by alias, so the
       wire format is camelCase: createdAt, updatedAt).

Schemas are separate from the SQLAlchemy model so the wire contract
(camelCase, optional inputs) can differ from the table layout.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteIn(BaseModel):
    """
    Body of POST /notes and PUT /notes/{id}.

    Both fields are optional. A missing or null field is stored as "", and
    PUT replaces both fields, so omitting one clears it.
    Non-string values are rejected (mapped to 400 in main.py).
    """
    title: Optional[str] = Field(default=None, description="Note title")
    text: Optional[str] = Field(default=None, description="Note body")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteOut(BaseModel):
    """Full representation of a stored note."""
    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: str = Field(description="Note title")
    text: str = Field(description="Note body")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last written (UTC ISO 8601)")

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DeleteResponse(BaseModel):
    """Returned by DELETE /notes/{id} on success."""
    msg: str = Field(default="Delete OK")


class ErrorResponse(BaseModel):
    """
    Standard error body for every non-2xx response.

    Fields:
        msg:        Human-readable description, never internal detail
        error:      Machine-readable code (validation_error, invalid_id,
                    not_found, store_unavailable, internal_server_error)
        request_id: Correlation ID, also sent as the X-Request-ID header
    """
    msg: str = Field(description="Human-readable error description")
    error: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Body of GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
