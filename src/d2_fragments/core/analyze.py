import logging

from d2_fragments.core.keywords import has_connection, is_directive, leading_identifier
from d2_fragments.core.ports.grammar import GrammarBackend, SyntaxNode
from d2_fragments.core.scanner import iter_unquoted_braces
from d2_fragments.core.syntax import BLOCK_TYPES, CONNECTION_TYPE, NAME_TYPES, node_text
from d2_fragments.models import BlockMetadata, Category

logger = logging.getLogger(__name__)

MAX_TOP_IDENTIFIERS = 5


def analyze_block(code: str, backend: GrammarBackend | None = None) -> BlockMetadata:
    """Compute search and badge metadata for one block of D2 code."""
    if backend is not None:
        try:
            return _analyze_with_grammar(code, backend)
        except Exception:
            logger.warning("Grammar analysis failed; falling back to text scanner", exc_info=True)
    return _analyze_with_text(code)


def categorize(shapes: int, connections: int, code: str, depth: int) -> Category:
    if "sequence_diagram" in code:
        return "sequence"
    if "grid-columns" in code or "grid-rows" in code:
        return "grid"
    if connections > 0 and connections >= shapes:
        return "flow"
    if shapes == 0 and connections == 0:
        return "simple"
    if shapes <= 3 and depth <= 1 and connections == 0:
        return "component"
    if shapes > 0 and connections > 0:
        return "mixed"
    if shapes > 0:
        return "component"
    return "simple"


class _Tally:
    def __init__(self) -> None:
        self.connections = 0
        self.max_depth = 0
        self.has_styles = False
        self.has_classes = False
        self.seen: set[str] = set()
        self.top: list[str] = []

    def add_shape(self, name: str) -> None:
        if not name or name in self.seen or is_directive(name):
            return
        self.seen.add(name)
        if len(self.top) < MAX_TOP_IDENTIFIERS:
            self.top.append(name)

    def flag(self, key: str) -> bool:
        """Record a style or class key; False for any other identifier."""
        if key == "style" or key.startswith("style."):
            self.has_styles = True
        elif key in ("class", "classes"):
            self.has_classes = True
        else:
            return False
        return True

    def result(self, code: str) -> BlockMetadata:
        shapes = len(self.seen)
        return BlockMetadata(
            shape_count=shapes,
            connection_count=self.connections,
            nesting_depth=self.max_depth,
            category=categorize(shapes, self.connections, code, self.max_depth),
            has_styles=self.has_styles,
            has_classes=self.has_classes,
            top_identifiers=self.top,
        )


def _analyze_with_text(code: str) -> BlockMetadata:
    tally = _Tally()
    depth = 0
    for line in code.split("\n"):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        opened = False
        for _, ch in iter_unquoted_braces(trimmed):
            if ch == "{":
                opened = True
                depth += 1
                tally.max_depth = max(tally.max_depth, depth)
            else:
                depth = max(0, depth - 1)

        for key in _statement_keys(trimmed):
            tally.flag(key)

        if has_connection(trimmed):
            tally.connections += 1
            continue

        # Top level only: a bare statement at depth 0, or a line opening the first level.
        if depth == 0 or (depth == 1 and opened):
            tally.add_shape(leading_identifier(trimmed))

    return tally.result(code)


def _statement_keys(line: str) -> list[str]:
    """Leading key of each statement on a line, split at unquoted braces.

    Connection statements have no key; quoted values are never keys.
    """
    cuts = [-1, *(i for i, _ in iter_unquoted_braces(line)), len(line)]
    keys: list[str] = []
    for start, end in zip(cuts, cuts[1:]):
        segment = line[start + 1 : end].strip()
        if segment and not has_connection(segment):
            keys.append(leading_identifier(segment))
    return keys


def _analyze_with_grammar(code: str, backend: GrammarBackend) -> BlockMetadata:
    source = code.encode("utf-8")
    tree = backend.parse(source)
    if tree is None:
        return _analyze_with_text(code)

    tally = _Tally()

    def visit(node: SyntaxNode, depth: int) -> None:
        tally.max_depth = max(tally.max_depth, depth)
        if node.type == CONNECTION_TYPE:
            tally.connections += 1
            return
        if node.type in NAME_TYPES:
            text = node_text(node, source)
            if not tally.flag(text) and depth == 0:
                tally.add_shape(text)
            return
        for child in node.children:
            visit(child, depth + 1 if child.type in BLOCK_TYPES else depth)

    visit(tree.root_node, 0)
    return tally.result(code)
