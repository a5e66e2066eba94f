import re

# D2 directives and style properties. These configure layout or appearance and
# never name a user-defined shape. Keep in sync with the tree-sitter grammar.
DIRECTIVE_KEYWORDS: frozenset[str] = frozenset(
    {
        "direction",
        "shape",
        "style",
        "label",
        "icon",
        "near",
        "tooltip",
        "link",
        "class",
        "classes",
        "constraint",
        "width",
        "height",
        "grid-columns",
        "grid-rows",
        "grid-gap",
        "vertical-gap",
        "horizontal-gap",
        "fill",
        "stroke",
        "stroke-width",
        "stroke-dash",
        "border-radius",
        "shadow",
        "opacity",
        "bold",
        "italic",
        "underline",
        "text-transform",
        "double-border",
        "multiple",
        "3d",
        "animated",
        "filled",
        "source-arrowhead",
        "target-arrowhead",
        "font-size",
        "font-color",
        "top",
        "left",
    }
)

# Longest tokens first so alternation never stops at a prefix.
CONNECTION_TOKENS: tuple[str, ...] = ("<->", "-->", "<--", "->", "<-", "--")

CONNECTION_RE = re.compile("|".join(re.escape(token) for token in CONNECTION_TOKENS))
IDENTIFIER_RE = re.compile(r"^([a-zA-Z_][\w.-]*)")


def is_directive(word: str) -> bool:
    """Return True for a directive keyword, including dotted forms like ``style.fill``."""
    if word in DIRECTIVE_KEYWORDS:
        return True
    dot = word.find(".")
    if dot > 0:
        return word[:dot] in DIRECTIVE_KEYWORDS
    return False


def has_connection(line: str) -> bool:
    return CONNECTION_RE.search(line) is not None


def leading_identifier(line: str) -> str:
    m = IDENTIFIER_RE.match(line)
    return m.group(1) if m else ""
