"""BaseService — shared foundation for tagtree services.

Every service receives the parsed :class:`EntityGraph` and the resolved
settings.  Services never raise for expected failures; they translate
core exceptions into :class:`ServiceResult` errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tagtree.infrastructure.measure import CellWidthMeasurer
from tagtree.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from tagtree.config.settings import TagtreeSettings
    from tagtree.infrastructure.document import EntityGraph
    from tagtree.infrastructure.measure import TextMeasurer


class BaseService:
    """Base for service-layer classes.

    Usage::

        class LayoutService(BaseService):
            def layout(self, root_id: str) -> ServiceResult:
                root = self._graph.get(root_id)
                ...
    """

    def __init__(
        self,
        graph: EntityGraph,
        settings: TagtreeSettings,
        *,
        measurer: TextMeasurer | None = None,
    ) -> None:
        self._graph = graph
        self._settings = settings
        self._measurer = measurer or CellWidthMeasurer(settings.measure.char_width)

    @staticmethod
    def _fail(op: str, code: str, message: str, **detail: object) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=dict(detail)),
        )
