"""Exception hierarchy raised by the layout core.

Services catch these and convert them to ``ServiceResult`` errors;
nothing below the service layer returns error values.
"""

from __future__ import annotations


class TagtreeError(Exception):
    """Base class for all tagtree errors."""


class GraftConsistencyError(TagtreeError):
    """A graft could not be applied to the live layout.

    Raised before any state is mutated, so the live groups stay untouched.
    """


class MeasurementUnavailableError(TagtreeError):
    """The text-measurement collaborator failed or is missing."""


class MalformedArrowDataError(TagtreeError):
    """A link's arrow list is shorter than its participant list (strict policy)."""


class DocumentError(TagtreeError):
    """An entity document could not be turned into an entity graph."""
