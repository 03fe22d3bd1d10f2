"""ServiceResult, ServiceError and ErrorCode — what every CLI-facing operation returns.

The pure pipeline functions return domain objects; the ``ViewService``
wraps them into a ServiceResult so the CLI and JSON output share a single
shape for success, warnings and failure.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Failure codes surfaced to the CLI and JSON output."""

    INVALID_DATASET = "INVALID_DATASET"  # unreadable file or wrong top-level shape
    NOT_FOUND = "NOT_FOUND"  # node id absent from the model
    INVALID_FORMAT = "INVALID_FORMAT"  # unsupported export format


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: ErrorCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Uniform return type for view operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"view"``, ``"neighbors"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues (skipped records, plugin failures).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata such as telemetry spans.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: ErrorCode,
        message: str,
        *,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
            warnings=warnings or [],
        )
