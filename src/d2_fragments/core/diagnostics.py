import re

from d2_fragments.core.ports.document import Document
from d2_fragments.models import Diagnostic, LineSpan

# `<stdin>:3:7: message` as printed by the d2 compiler and formatter.
_STRUCTURED_RE = re.compile(r"(\S+?):(\d+):(\d+):\s*(.*)")
_EMBEDDED_RE = re.compile(r"line (\d+):(\d+)", re.IGNORECASE)


class TextDocument:
    """Line index over an in-memory string, 1-based like an editor buffer."""

    def __init__(self, text: str) -> None:
        self._spans: list[LineSpan] = []
        offset = 0
        for line in text.split("\n"):
            self._spans.append(LineSpan(from_=offset, to=offset + len(line)))
            offset += len(line) + 1
        self.length = len(text)

    @property
    def lines(self) -> int:
        return len(self._spans)

    def line(self, n: int) -> LineSpan:
        if not 1 <= n <= len(self._spans):
            raise IndexError(f"Line {n} out of range 1..{len(self._spans)}")
        return self._spans[n - 1]


def map_diagnostics(error_text: str, document: Document) -> list[Diagnostic]:
    """Anchor compiler error output to positions in ``document``.

    Each recognized ``prefix:LINE:COL: message`` or ``line LINE:COL`` entry
    yields its own diagnostic. Unrecognized text produces a single diagnostic
    on the first line, and only when nothing else matched before it.
    """
    diagnostics: list[Diagnostic] = []

    for raw in error_text.split("\n"):
        trimmed = raw.strip()
        if not trimmed:
            continue

        m = _STRUCTURED_RE.search(trimmed)
        if m:
            line_no, col = int(m.group(2)), int(m.group(3))
            if 1 <= line_no <= document.lines:
                span = document.line(line_no)
                start = min(max(span.from_ + col - 1, span.from_), span.to)
                diagnostics.append(Diagnostic(from_=start, to=span.to, message=m.group(4) or trimmed))
                continue

        m = _EMBEDDED_RE.search(trimmed)
        if m:
            line_no = int(m.group(1))
            if 1 <= line_no <= document.lines:
                span = document.line(line_no)
                diagnostics.append(Diagnostic(from_=span.from_, to=span.to, message=trimmed))
                continue

        if not diagnostics:
            if document.lines < 1:
                raise ValueError("Cannot anchor a diagnostic in a document without lines")
            span = document.line(1)
            diagnostics.append(Diagnostic(from_=span.from_, to=span.to, message=trimmed))

    return diagnostics
