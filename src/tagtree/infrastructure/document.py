"""Entity documents — JSON files describing a Word/Link graph.

Document format::

    {
      "words": [{"id": "w1", "text": "Mary"}],
      "links": [
        {
          "id": "l1",
          "text": "agent",
          "trigger": "w2",
          "reltype": null,
          "top": true,
          "arguments": [{"anchor": "w2", "role": "pred"}, {"anchor": "w1"}],
          "arrows": [1, -1]
        }
      ]
    }

Links may reference links declared later; arguments are attached in
document order so every entity's ``links`` list follows that order.
``arrows`` may be omitted or shorter than ``arguments``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeAlias

import networkx as nx
from pydantic import BaseModel, Field, ValidationError

from tagtree.domain.entities import INCOMING, Link, Word
from tagtree.domain.errors import DocumentError
from tagtree.domain.types import NodeKind

logger = logging.getLogger(__name__)

_Graph: TypeAlias = nx.DiGraph


class WordSpec(BaseModel):
    """A word entry."""

    model_config = {"frozen": True}

    id: str
    text: str


class ArgumentSpec(BaseModel):
    """One participant of a link entry."""

    model_config = {"frozen": True}

    anchor: str
    role: str = ""


class LinkSpec(BaseModel):
    """A link entry."""

    model_config = {"frozen": True}

    id: str
    text: str = ""
    trigger: str | None = None
    reltype: str | None = None
    top: bool = True
    arguments: list[ArgumentSpec] = Field(default_factory=list)
    arrows: list[int] = Field(default_factory=list)


class DocumentSpec(BaseModel):
    """Top-level document."""

    model_config = {"frozen": True}

    words: list[WordSpec] = Field(default_factory=list)
    links: list[LinkSpec] = Field(default_factory=list)


class EntityGraph:
    """Entities of one document, addressable by id."""

    def __init__(self, words: list[Word], links: list[Link]) -> None:
        self.words = words
        self.links = links
        self._by_id: dict[str, Word | Link] = {}
        for entity in [*words, *links]:
            self._by_id[entity.id] = entity

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, entity_id: str) -> Word | Link | None:
        return self._by_id.get(entity_id)

    def to_digraph(self) -> _Graph:
        """Directed view: link -> participant, reversed for ``-1`` arrows.

        Participants without a recorded arrow keep the outgoing direction.
        """
        g: _Graph = nx.DiGraph()
        for word in self.words:
            g.add_node(word.id, kind=word.kind.value, label=word.label)
        for link in self.links:
            g.add_node(link.id, kind=link.kind.value, label=link.label)
        for link in self.links:
            for i, anchor in enumerate(link.words):
                if link.direction_at(i) == INCOMING:
                    g.add_edge(anchor.id, link.id, role=link.arguments[i].role)
                else:
                    g.add_edge(link.id, anchor.id, role=link.arguments[i].role)
        return g


def parse_document(data: dict[str, Any]) -> EntityGraph:
    """Validate *data* and build the entity graph.

    Raises:
        DocumentError: Schema violations, duplicate ids, or dangling references.
    """
    try:
        spec = DocumentSpec.model_validate(data)
    except ValidationError as exc:
        msg = f"Invalid entity document: {exc.error_count()} validation error(s)"
        raise DocumentError(msg) from exc

    by_id: dict[str, Word | Link] = {}

    def register(entity: Word | Link) -> None:
        if entity.id in by_id:
            raise DocumentError(f"Duplicate entity id: {entity.id!r}")
        by_id[entity.id] = entity

    words = [Word(val=w.text, id=w.id) for w in spec.words]
    for word in words:
        register(word)
    links = [Link(text=ls.text, id=ls.id, reltype=ls.reltype, top=ls.top) for ls in spec.links]
    for link in links:
        register(link)

    def resolve(ref: str, owner: str) -> Word | Link:
        entity = by_id.get(ref)
        if entity is None:
            raise DocumentError(f"Link {owner!r} references unknown entity {ref!r}")
        return entity

    for link, ls in zip(links, spec.links, strict=True):
        if ls.trigger is not None:
            trigger = resolve(ls.trigger, ls.id)
            if trigger.kind is not NodeKind.WORD:
                raise DocumentError(f"Link {ls.id!r} trigger {ls.trigger!r} is not a word")
            link.trigger = trigger  # type: ignore[assignment]
        for arg in ls.arguments:
            link.add_argument(resolve(arg.anchor, ls.id), arg.role)
        link.arrow_directions = list(ls.arrows)

    logger.debug("Parsed document: %d words, %d links", len(words), len(links))
    return EntityGraph(words, links)


def load_document(path: Path) -> EntityGraph:
    """Read and parse a JSON entity document from *path*."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Cannot read {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DocumentError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise DocumentError(f"{path}: top-level JSON value must be an object")
    return parse_document(data)
