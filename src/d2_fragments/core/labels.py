import re

from d2_fragments.core.keywords import leading_identifier
from d2_fragments.core.ports.grammar import SyntaxNode
from d2_fragments.core.scanner import braces_delta
from d2_fragments.core.syntax import (
    DECLARATION_TYPE,
    LABEL_TYPES,
    NAME_TYPES,
    block_child,
    header_children,
    node_text,
)

MAX_LABEL_LENGTH = 60

_QUOTED = r"""("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')"""
_LINE_LABEL_RE = re.compile(r"^\s*[^:{]+?:\s*" + _QUOTED + r"\s*$")
_HEADER_LABEL_RE = re.compile(r"^\s*[^:{]+?:\s*" + _QUOTED + r"\s*\{")
_BODY_LABEL_RE = re.compile(r"^\s*label\s*:\s*(" + _QUOTED[1:-1] + r"|[^}\n]+)")


def clean_label(raw: str) -> str | None:
    """Normalize label text for display; returns None when nothing is left."""
    text = raw.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        text = text[1:-1]
    text = text.replace("\\n", " ")
    if len(text) > MAX_LABEL_LENGTH:
        text = text[: MAX_LABEL_LENGTH - 3] + "..."
    return text or None


def label_from_text(code: str, braced: bool) -> str | None:
    lines = code.split("\n")
    if not braced:
        m = _LINE_LABEL_RE.match(lines[0])
        return clean_label(m.group(1)) if m else None

    m = _HEADER_LABEL_RE.match(lines[0])
    if m:
        return clean_label(m.group(1))

    # Only the block's own properties; nested blocks keep their labels.
    depth = braces_delta(lines[0])
    for line in lines[1:]:
        if depth == 1:
            m = _BODY_LABEL_RE.match(line)
            if m:
                return clean_label(m.group(1))
        depth += braces_delta(line)
        if depth <= 0:
            break
    return None


def _declaration_key(node: SyntaxNode, source: bytes) -> str:
    for child in header_children(node):
        if child.type in NAME_TYPES:
            return node_text(child, source)
    return leading_identifier(node_text(node, source).lstrip())


def label_from_node(node: SyntaxNode, source: bytes) -> str | None:
    # A header label only counts when quoted; bare values are shape properties.
    for child in header_children(node):
        if child.type in LABEL_TYPES:
            text = node_text(child, source).strip()
            return clean_label(text) if text[:1] in ('"', "'") else None

    block = block_child(node)
    if block is None:
        return None
    for child in block.children:
        if child.type != DECLARATION_TYPE or _declaration_key(child, source) != "label":
            continue
        for part in header_children(child):
            if part.type in LABEL_TYPES:
                return clean_label(node_text(part, source))
    return None
