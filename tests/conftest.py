"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from tests.fake_grammar import BrokenParser, FakeD2Parser, NullParser

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag everything under tests/ as "unit"
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def d2_parser() -> FakeD2Parser:
    """Return a parser with the tree-sitter D2 node surface."""
    return FakeD2Parser()


@pytest.fixture
def broken_parser() -> BrokenParser:
    """Return a parser that raises on every parse."""
    return BrokenParser()


@pytest.fixture
def null_parser() -> NullParser:
    """Return a parser that yields no tree."""
    return NullParser()


@pytest.fixture
def examples_dir() -> Path:
    return _REPO_ROOT / "tests" / "data"
