"""Shared pytest fixtures and test helpers for tagtree tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from tagtree.config.settings import TagtreeSettings
from tagtree.domain.entities import INCOMING, OUTGOING, Link, Word
from tagtree.infrastructure.measure import CellWidthMeasurer
from tagtree.services.telemetry import disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_telemetry() -> Generator[None]:
    """Verbose CLI runs enable telemetry for the whole context; reset it."""
    yield
    disable_telemetry()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """CLI invocations reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    tagtree = logging.getLogger("tagtree")
    tagtree_level = tagtree.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    tagtree.setLevel(tagtree_level)


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's TAGTREE_* environment out of the tests."""
    monkeypatch.delenv("TAGTREE_CONFIG", raising=False)
    monkeypatch.delenv("TAGTREE_LAYOUT__MAX_DEPTH", raising=False)
    monkeypatch.delenv("TAGTREE_LAYOUT__VARIANT", raising=False)


@pytest.fixture
def measurer() -> CellWidthMeasurer:
    """Ten units per character, so widths are easy to compute by hand."""
    return CellWidthMeasurer(char_width=10.0)


@pytest.fixture
def settings(tmp_path: Path) -> TagtreeSettings:
    """Default settings, isolated from any tagtree.toml above tmp_path."""
    return TagtreeSettings.from_cli(config_path=str(tmp_path / "missing.toml"))


# ---------------------------------------------------------------------------
# Example graphs
# ---------------------------------------------------------------------------


@dataclass
class EatGraph:
    """``Mary <-agent- eats -theme-> pizza``.

    ``agent`` points into ``eats`` (incoming for it); ``theme`` points out
    of ``eats`` into ``pizza``.
    """

    eats: Word
    mary: Word
    pizza: Word
    agent: Link
    theme: Link


def build_eat_graph() -> EatGraph:
    eats = Word("eats", id="w")
    mary = Word("Mary", id="x")
    pizza = Word("pizza", id="y")
    agent = Link(text="agent", id="l1")
    agent.add_argument(mary, "arg0", OUTGOING)
    agent.add_argument(eats, "pred", INCOMING)
    theme = Link(text="theme", id="l2")
    theme.add_argument(eats, "pred", OUTGOING)
    theme.add_argument(pizza, "arg1", INCOMING)
    return EatGraph(eats=eats, mary=mary, pizza=pizza, agent=agent, theme=theme)


@pytest.fixture
def eat_graph() -> EatGraph:
    return build_eat_graph()


@dataclass
class MeetGraph:
    """An event ``meet`` triggered by ``met`` with a ``he``/``John`` coreference."""

    met: Word
    john: Word
    mary: Word
    he: Word
    event: Link
    coref: Link


def build_meet_graph() -> MeetGraph:
    met = Word("met", id="t")
    john = Word("John", id="a")
    mary = Word("Mary", id="b")
    he = Word("he", id="c")
    event = Link(text="meet", id="e", trigger=met)
    event.add_argument(met, "trigger", OUTGOING)
    event.add_argument(john, "agent", INCOMING)
    event.add_argument(mary, "patient", INCOMING)
    coref = Link(text="coref", id="r", reltype="coref")
    coref.add_argument(he, direction=OUTGOING)
    coref.add_argument(john, direction=OUTGOING)
    return MeetGraph(met=met, john=john, mary=mary, he=he, event=event, coref=coref)


@pytest.fixture
def meet_graph() -> MeetGraph:
    return build_meet_graph()


EAT_DOCUMENT: dict[str, Any] = {
    "words": [
        {"id": "w", "text": "eats"},
        {"id": "x", "text": "Mary"},
        {"id": "y", "text": "pizza"},
    ],
    "links": [
        {
            "id": "l1",
            "text": "agent",
            "arguments": [{"anchor": "x", "role": "arg0"}, {"anchor": "w", "role": "pred"}],
            "arrows": [1, -1],
        },
        {
            "id": "l2",
            "text": "theme",
            "arguments": [{"anchor": "w", "role": "pred"}, {"anchor": "y", "role": "arg1"}],
            "arrows": [1, -1],
        },
    ],
}


@pytest.fixture
def eat_document(tmp_path: Path) -> Path:
    """The eat graph written as a JSON entity document."""
    path = tmp_path / "eat.json"
    path.write_text(json.dumps(EAT_DOCUMENT), encoding="utf-8")
    return path
