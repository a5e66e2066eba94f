"""Split D2 source into named, line-ranged blocks.

Two strategies produce the same blocks for well-formed input: a tree-sitter
backed one used when a grammar backend is supplied, and a line scanner used
otherwise or whenever the backend fails.
"""

import logging
import re

from d2_fragments.core.keywords import has_connection, is_directive, leading_identifier
from d2_fragments.core.labels import label_from_node, label_from_text
from d2_fragments.core.ports.grammar import GrammarBackend, SyntaxNode
from d2_fragments.core.scanner import braces_delta, find_brace_span, iter_unquoted_braces, opens_brace
from d2_fragments.core.syntax import (
    COMMENT_TYPES,
    CONNECTION_TYPE,
    NAME_TYPES,
    block_child,
    header_children,
    line_range,
    node_text,
)
from d2_fragments.models import Block

logger = logging.getLogger(__name__)

_TRAILING_BLOCK_RE = re.compile(r"\s*:?\s*\{.*")


def extract_blocks(source: str, backend: GrammarBackend | None = None) -> list[Block]:
    if backend is not None:
        try:
            return _extract_with_grammar(source, backend)
        except Exception:
            logger.warning("Grammar extraction failed; falling back to text scanner", exc_info=True)
    return _extract_with_text(source)


def filter_directives(blocks: list[Block]) -> list[Block]:
    return [block for block in blocks if not is_directive(block.name)]


def statement_name(header: str) -> str:
    """Name a connection statement: the header without any trailing ``: {…}``."""
    return _TRAILING_BLOCK_RE.sub("", header.strip()).rstrip(":").strip()


def _header_name(line: str) -> str:
    head = line.strip()
    for i, ch in iter_unquoted_braces(head):
        if ch == "{":
            head = head[:i]
            break
    if has_connection(head):
        return statement_name(head)
    return leading_identifier(head)


# --- text strategy ---


def _extract_with_text(source: str) -> list[Block]:
    lines = source.split("\n")
    blocks: list[Block] = []
    i = 0
    while i < len(lines):
        trimmed = lines[i].strip()
        if not trimmed or trimmed.startswith("#"):
            i += 1
            continue

        if not opens_brace(trimmed):
            blocks.append(
                Block(
                    name=_header_name(trimmed) or f"line-{i + 1}",
                    code=lines[i],
                    start_line=i,
                    end_line=i,
                    label=label_from_text(lines[i], braced=False),
                )
            )
            i += 1
            continue

        start = i
        end = len(lines) - 1
        depth = 0
        for j in range(start, len(lines)):
            depth += braces_delta(lines[j])
            if depth <= 0:
                end = j
                break

        code = "\n".join(lines[start : end + 1])
        blocks.append(
            Block(
                name=_header_name(trimmed) or f"block-{len(blocks) + 1}",
                code=code,
                start_line=start,
                end_line=end,
                label=label_from_text(code, braced=True),
                children=_text_children(lines, start, end),
            )
        )
        i = end + 1

    return filter_directives(blocks)


def _text_children(lines: list[str], start_line: int, end_line: int) -> list[Block] | None:
    code = "\n".join(lines[start_line : end_line + 1])
    span = find_brace_span(code)
    if span is None:
        return None
    open_at, close_at = span
    interior_line = start_line + code.count("\n", 0, open_at)
    return _children_from_interior(code[open_at + 1 : close_at], interior_line, lines, None)


def _children_from_interior(
    interior: str, interior_line: int, source_lines: list[str], backend: GrammarBackend | None
) -> list[Block] | None:
    """Extract the blocks inside a brace interior, numbered and sliced against ``source_lines``."""
    lines = interior.split("\n")
    skipped = 0
    while skipped < len(lines) and not lines[skipped].strip():
        skipped += 1
    if skipped == len(lines):
        return None

    offset = interior_line + skipped
    nested = extract_blocks("\n".join(lines[skipped:]), backend)
    children = [_rebase(child, offset, source_lines) for child in filter_directives(nested)]
    return children or None


def _rebase(block: Block, offset: int, source_lines: list[str]) -> Block:
    # Children keep whole source lines, including a line shared with a brace.
    start = block.start_line + offset
    end = block.end_line + offset
    return block.model_copy(
        update={
            "code": "\n".join(source_lines[start : end + 1]),
            "start_line": start,
            "end_line": end,
            "children": [_rebase(child, offset, source_lines) for child in block.children] if block.children else None,
        }
    )


# --- grammar strategy ---


def _extract_with_grammar(source: str, backend: GrammarBackend) -> list[Block]:
    source_bytes = source.encode("utf-8")
    tree = backend.parse(source_bytes)
    if tree is None:
        logger.debug("Grammar backend returned no tree; using text scanner")
        return _extract_with_text(source)

    lines = source.split("\n")
    blocks: list[Block] = []
    for node in tree.root_node.children:
        if not node.is_named or node.type in COMMENT_TYPES:
            continue
        name = _node_name(node, source_bytes)
        if not name:
            continue
        start, end = line_range(node)
        blocks.append(
            Block(
                name=name,
                code="\n".join(lines[start : end + 1]),
                start_line=start,
                end_line=end,
                label=label_from_node(node, source_bytes),
                children=_grammar_children(node, source_bytes, lines, backend),
            )
        )
    return filter_directives(blocks)


def _node_name(node: SyntaxNode, source: bytes) -> str:
    identifiers: list[str] = []
    has_conn = False

    def visit(n: SyntaxNode) -> None:
        nonlocal has_conn
        if n.type == CONNECTION_TYPE:
            has_conn = True
            identifiers.append(node_text(n, source))
        elif n.type in NAME_TYPES:
            identifiers.append(node_text(n, source))
        else:
            for child in n.children:
                visit(child)

    head = header_children(node)
    for child in head:
        visit(child)

    if has_conn:
        header = source[node.start_byte : head[-1].end_byte].decode("utf-8", errors="replace")
        return statement_name(header)
    if identifiers:
        return identifiers[0]
    first = node_text(node, source).split("\n")[0].strip()
    return leading_identifier(first)


def _grammar_children(
    node: SyntaxNode, source: bytes, lines: list[str], backend: GrammarBackend
) -> list[Block] | None:
    block = block_child(node)
    if block is None:
        return None
    inner_end = block.end_byte - 1 if source[block.end_byte - 1 : block.end_byte] == b"}" else block.end_byte
    interior = source[block.start_byte + 1 : inner_end].decode("utf-8", errors="replace")
    return _children_from_interior(interior, block.start_point[0], lines, backend)
