import logging
import os
from typing import cast

from tree_sitter import Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from d2_fragments.core.ports.grammar import GrammarBackend

logger = logging.getLogger(__name__)

DEFAULT_GRAMMAR = "d2"


def grammar_disabled() -> bool:
    return os.getenv("D2_FRAGMENTS_DISABLE_GRAMMAR", "").strip().lower() in ("1", "true", "yes")


def load_backend(language: str | None = None) -> GrammarBackend | None:
    """Resolve a tree-sitter parser for D2, or None when it is unavailable.

    The returned parser is meant to be created once and passed to
    ``extract_blocks`` / ``analyze_block``; None selects the text scanner.
    """
    if grammar_disabled():
        logger.info("Grammar backend disabled by D2_FRAGMENTS_DISABLE_GRAMMAR")
        return None

    name = language or os.getenv("D2_FRAGMENTS_GRAMMAR", DEFAULT_GRAMMAR)
    try:
        parser: Parser = get_parser(cast(SupportedLanguage, name))
    except Exception:
        logger.warning("Tree-sitter grammar %r unavailable; using text scanner", name, exc_info=True)
        return None
    logger.info("Loaded tree-sitter grammar %r", name)
    return cast(GrammarBackend, parser)
