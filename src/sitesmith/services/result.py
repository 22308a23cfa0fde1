"""ServiceResult and ServiceError, returned by every public service method.

Failures are values rather than exceptions. A failed result names the
operation that failed and, for filesystem errors, the path involved.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    NOT_FOUND = "NOT_FOUND"
    IO_ERROR = "IO_ERROR"
    INVALID_PERMALINK = "INVALID_PERMALINK"
    INVALID_DESTINATION = "INVALID_DESTINATION"
    LAYOUT_ERROR = "LAYOUT_ERROR"
    TEMPLATE_ERROR = "TEMPLATE_ERROR"


class ServiceError(BaseModel):
    """Why an operation failed.

    ``detail`` carries ``op`` and ``path`` when the failure came from the
    filesystem.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation (``build``, ``routes``, ...).

    ``data`` is only meaningful when ``ok`` is true; ``error`` only when it
    is false. ``warnings`` may be set either way.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
