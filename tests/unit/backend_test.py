"""Unit tests for grammar backend resolution."""

import pytest

from d2_fragments.core import backend as backend_module
from d2_fragments.core.backend import load_backend
from d2_fragments.core.extract import extract_blocks
from tests.fake_grammar import FakeD2Parser


def test_returns_parser_from_language_pack(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeD2Parser()
    requested: list[str] = []

    def _get_parser(name: str) -> FakeD2Parser:
        requested.append(name)
        return fake

    monkeypatch.delenv("D2_FRAGMENTS_GRAMMAR", raising=False)
    monkeypatch.delenv("D2_FRAGMENTS_DISABLE_GRAMMAR", raising=False)
    monkeypatch.setattr(backend_module, "get_parser", _get_parser)

    assert load_backend() is fake
    assert requested == ["d2"]


def test_language_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    requested: list[str] = []
    monkeypatch.setenv("D2_FRAGMENTS_GRAMMAR", "d2lang")
    monkeypatch.delenv("D2_FRAGMENTS_DISABLE_GRAMMAR", raising=False)
    monkeypatch.setattr(backend_module, "get_parser", lambda name: requested.append(name) or FakeD2Parser())

    load_backend()

    assert requested == ["d2lang"]


def test_unavailable_grammar_returns_none(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    def _missing(name: str) -> None:
        raise LookupError(f"Language not found: {name}")

    monkeypatch.delenv("D2_FRAGMENTS_DISABLE_GRAMMAR", raising=False)
    monkeypatch.setattr(backend_module, "get_parser", _missing)

    with caplog.at_level("WARNING", logger="d2_fragments.core.backend"):
        assert load_backend("d2") is None
    assert "unavailable" in caplog.text


def test_disabled_by_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("D2_FRAGMENTS_DISABLE_GRAMMAR", "1")
    monkeypatch.setattr(backend_module, "get_parser", lambda name: pytest.fail("parser should not load"))

    assert load_backend() is None


def test_missing_backend_still_extracts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(backend_module, "get_parser", lambda name: (_ for _ in ()).throw(LookupError(name)))
    monkeypatch.delenv("D2_FRAGMENTS_DISABLE_GRAMMAR", raising=False)

    blocks = extract_blocks("a -> b", load_backend())

    assert [b.name for b in blocks] == ["a -> b"]
