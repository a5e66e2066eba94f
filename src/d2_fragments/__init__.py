from d2_fragments.core.analyze import analyze_block, categorize
from d2_fragments.core.backend import load_backend
from d2_fragments.core.diagnostics import TextDocument, map_diagnostics
from d2_fragments.core.extract import extract_blocks, filter_directives
from d2_fragments.core.keywords import CONNECTION_TOKENS, DIRECTIVE_KEYWORDS, is_directive
from d2_fragments.core.scanner import braces_delta, opens_brace
from d2_fragments.models import Block, BlockMetadata, Diagnostic, LineSpan

__all__ = [
    "CONNECTION_TOKENS",
    "DIRECTIVE_KEYWORDS",
    "Block",
    "BlockMetadata",
    "Diagnostic",
    "LineSpan",
    "TextDocument",
    "analyze_block",
    "braces_delta",
    "categorize",
    "extract_blocks",
    "filter_directives",
    "is_directive",
    "load_backend",
    "map_diagnostics",
    "opens_brace",
]
