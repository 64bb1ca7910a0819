"""Classification enums shared by the domain and layout layers."""

from __future__ import annotations

from enum import StrEnum


class NodeKind(StrEnum):
    """The two closed entity variants."""

    WORD = "Word"
    LINK = "Link"


class EdgeType(StrEnum):
    """Rendered edge classes; graft edges join a grafted group to its anchor."""

    CHILD = "child"
    SIBLING = "sibling"
    GRAFT = "graft"


class HierarchyVariant(StrEnum):
    """Which hierarchy builder a full layout pass uses."""

    COREFERENCE = "coreference"
    INCOMING = "incoming"


class ArrowPolicy(StrEnum):
    """How to treat a link whose arrow list is shorter than its participants."""

    PERMISSIVE = "permissive"
    STRICT = "strict"


class RegraftPolicy(StrEnum):
    """What grafting an already grafted incoming reference does."""

    REUSE = "reuse"
    DUPLICATE = "duplicate"
