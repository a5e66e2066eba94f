from typing import Protocol


class LineRange(Protocol):
    @property
    def from_(self) -> int: ...

    @property
    def to(self) -> int: ...


class Document(Protocol):
    """Line-indexed view of an editing buffer. ``line`` is 1-based."""

    @property
    def lines(self) -> int: ...

    def line(self, n: int) -> LineRange: ...
