"""ServiceResult and ServiceError, the return type of every tagtree service.

Layout and inspect never raise to their caller: domain errors become a
failed result with a stable ``code`` (see :mod:`tagtree.services.layout`
for the list), and the CLI decides exit status from ``ok`` alone.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Why an operation failed.

    ``detail`` carries the offending ids (``entity``, ``anchor``,
    ``incoming``, ``path``) so JSON consumers need not parse ``message``.
    """

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: Whether the operation succeeded.
        op: ``"layout"`` or ``"inspect"``.
        data: The placed groups (layout) or graph summary (inspect).
        warnings: Problems that did not stop the operation, such as links
            with fewer arrows than arguments.
        error: Populated when ``ok`` is False.
        meta: ``{"telemetry": ...}`` span tree when telemetry is enabled.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
