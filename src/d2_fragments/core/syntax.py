from d2_fragments.core.ports.grammar import SyntaxNode

# Node types produced by the tree-sitter D2 grammar.
COMMENT_TYPES = frozenset({"comment", "block_comment"})
BLOCK_TYPES = frozenset({"block", "block_definition"})
NAME_TYPES = frozenset({"identifier", "identifier_chain"})
LABEL_TYPES = frozenset({"label", "string", "label_codeblock"})
CONNECTION_TYPE = "connection"
DECLARATION_TYPE = "declaration"


def node_text(node: SyntaxNode, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def header_children(node: SyntaxNode) -> list[SyntaxNode]:
    """Children of a declaration that precede its braced block."""
    result: list[SyntaxNode] = []
    for child in node.children:
        if child.type in BLOCK_TYPES:
            break
        result.append(child)
    return result


def block_child(node: SyntaxNode) -> SyntaxNode | None:
    for child in node.children:
        if child.type in BLOCK_TYPES:
            return child
    return None


def line_range(node: SyntaxNode) -> tuple[int, int]:
    """0-based inclusive row range, ignoring a trailing newline the node may own."""
    start_row = node.start_point[0]
    end_row, end_col = node.end_point
    if end_col == 0 and end_row > start_row:
        end_row -= 1
    return start_row, end_row
