"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, tagtree.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tagtree.domain.types import ArrowPolicy, HierarchyVariant, RegraftPolicy

# --- tagtree.toml sections ---


class LayoutConfig(BaseModel):
    """[layout] section."""

    model_config = {"frozen": True}

    max_depth: int = Field(default=20, ge=0)
    row_height: float = Field(default=50.0, gt=0)
    child_separation: float = Field(default=20.0, ge=0)
    sibling_separation: float = Field(default=50.0, ge=0)
    variant: HierarchyVariant = HierarchyVariant.COREFERENCE
    arrow_policy: ArrowPolicy = ArrowPolicy.PERMISSIVE
    regraft: RegraftPolicy = RegraftPolicy.REUSE


class MeasureConfig(BaseModel):
    """[measure] section."""

    model_config = {"frozen": True}

    char_width: float = Field(default=7.0, gt=0)
