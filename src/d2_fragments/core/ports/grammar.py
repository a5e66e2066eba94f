from collections.abc import Sequence
from typing import Protocol


class SyntaxNode(Protocol):
    @property
    def type(self) -> str: ...

    @property
    def is_named(self) -> bool: ...

    @property
    def children(self) -> Sequence["SyntaxNode"]: ...

    @property
    def start_byte(self) -> int: ...

    @property
    def end_byte(self) -> int: ...

    @property
    def start_point(self) -> tuple[int, int]: ...

    @property
    def end_point(self) -> tuple[int, int]: ...


class SyntaxTree(Protocol):
    @property
    def root_node(self) -> SyntaxNode: ...


class GrammarBackend(Protocol):
    """The subset of ``tree_sitter.Parser`` the extractor and analyzer rely on."""

    def parse(self, source: bytes) -> SyntaxTree | None: ...
