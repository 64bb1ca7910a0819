"""Word/Link entity model consumed by the layout core.

Entities compare and hash by identity: two walks that reach the same
underlying entity must recognize it as the same object, never as an
equal-valued copy.  ``dataclass(eq=False)`` keeps ``object.__eq__``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

from tagtree.domain.types import NodeKind

# Arrow direction values stored per participant in Link.arrow_directions.
OUTGOING = 1
INCOMING = -1


@dataclass(eq=False)
class Word:
    """A leaf-capable entity with a text label."""

    val: str
    id: str = ""
    links: list[Link] = field(default_factory=list, repr=False)

    kind = NodeKind.WORD

    @property
    def label(self) -> str:
        return self.val


@dataclass(eq=False)
class Argument:
    """One participant slot of a Link."""

    anchor: Word | Link
    role: str = ""


@dataclass(eq=False)
class Link:
    """A typed connective entity joining Words and/or other Links.

    Attributes:
        text: Display label of the link.
        arguments: Ordered participant slots.
        arrow_directions: Per-participant direction (``+1`` outgoing,
            ``-1`` incoming).  May be shorter than ``arguments`` when the
            source data is incomplete.
        trigger: The Word licensing this link, if any.
        reltype: Relation label for trigger-less (coreference) links.
        top: Whether the link is shown at the top level.
        links: Links that take this link as a participant.
    """

    text: str = ""
    id: str = ""
    arguments: list[Argument] = field(default_factory=list, repr=False)
    arrow_directions: list[int] = field(default_factory=list)
    trigger: Word | None = field(default=None, repr=False)
    reltype: str | None = None
    top: bool = True
    links: list[Link] = field(default_factory=list, repr=False)

    kind = NodeKind.LINK

    @property
    def label(self) -> str:
        return self.text

    @property
    def words(self) -> list[Word | Link]:
        """Participant entities in argument order."""
        return [arg.anchor for arg in self.arguments]

    def add_argument(
        self,
        anchor: Word | Link,
        role: str = "",
        direction: int | None = None,
    ) -> Argument:
        """Append a participant and register this link on it.

        When *direction* is None no arrow entry is recorded, which leaves
        ``arrow_directions`` shorter than the participant list.
        """
        arg = Argument(anchor=anchor, role=role)
        self.arguments.append(arg)
        if direction is not None:
            self.arrow_directions.append(direction)
        anchor.links.append(self)
        return arg

    def index_of(self, entity: Word | Link) -> int:
        """Identity-based index of *entity* among the participants, or -1."""
        for i, arg in enumerate(self.arguments):
            if arg.anchor is entity:
                return i
        return -1

    def direction_at(self, index: int) -> int | None:
        """Arrow direction of participant *index*; None when not recorded."""
        if 0 <= index < len(self.arrow_directions):
            return self.arrow_directions[index]
        return None


GraphNode: TypeAlias = Word | Link
