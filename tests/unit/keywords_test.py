"""Unit tests for the directive keyword set and connection tokens."""

import pytest

from d2_fragments.core.keywords import has_connection, is_directive, leading_identifier


@pytest.mark.parametrize("word", ["direction", "style", "grid-columns", "style.fill", "classes", "label.near"])
def test_directives(word: str) -> None:
    assert is_directive(word)


@pytest.mark.parametrize("word", ["server", "styles", "network.style", ".style", "a -> b"])
def test_not_directives(word: str) -> None:
    assert not is_directive(word)


@pytest.mark.parametrize("line", ["a -> b", "a <- b", "a <-> b", "a -- b", "a --> b", "a <-- b"])
def test_connection_tokens(line: str) -> None:
    assert has_connection(line)


def test_hyphenated_names_are_not_connections() -> None:
    assert not has_connection("grid-columns: 3")


def test_leading_identifier() -> None:
    assert leading_identifier("network.server {") == "network.server"
    assert leading_identifier("grid-columns: 2") == "grid-columns"
    assert leading_identifier('"quoted"') == ""
