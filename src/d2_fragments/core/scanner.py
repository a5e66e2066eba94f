from collections.abc import Iterator

_QUOTES = ('"', "'")


def iter_unquoted_braces(line: str) -> Iterator[tuple[int, str]]:
    """Yield ``(index, char)`` for every ``{`` or ``}`` outside a string literal.

    Strings are single- or double-quoted; inside one, a backslash escapes the
    next character. String state never carries past the end of ``line``.
    """
    quote = ""
    i = 0
    while i < len(line):
        ch = line[i]
        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in _QUOTES:
            quote = ch
        elif ch in "{}":
            yield i, ch
        i += 1


def braces_delta(line: str) -> int:
    delta = 0
    for _, ch in iter_unquoted_braces(line):
        delta += 1 if ch == "{" else -1
    return delta


def opens_brace(line: str) -> bool:
    return any(ch == "{" for _, ch in iter_unquoted_braces(line))


def find_brace_span(text: str) -> tuple[int, int] | None:
    """Locate the first unquoted ``{`` in ``text`` and its matching ``}``.

    Returns character offsets ``(open, close)``. An unmatched ``{`` closes at
    ``len(text)``; text without any ``{`` yields None.
    """
    open_at: int | None = None
    depth = 0
    offset = 0
    for line in text.split("\n"):
        for i, ch in iter_unquoted_braces(line):
            if ch == "{":
                if open_at is None:
                    open_at = offset + i
                depth += 1
            elif open_at is not None:
                depth -= 1
                if depth == 0:
                    return open_at, offset + i
        offset += len(line) + 1
    if open_at is None:
        return None
    return open_at, len(text)
