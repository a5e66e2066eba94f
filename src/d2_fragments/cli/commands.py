import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from d2_fragments.core.analyze import analyze_block
from d2_fragments.core.backend import load_backend
from d2_fragments.core.diagnostics import TextDocument, map_diagnostics
from d2_fragments.core.extract import extract_blocks
from d2_fragments.core.ports.grammar import GrammarBackend
from d2_fragments.models import Block

console = Console()

_SourcePath = Annotated[Path, typer.Argument(help="Path to a D2 file.", exists=True, dir_okay=False)]
_GrammarOpt = Annotated[bool, typer.Option("--grammar/--no-grammar", help="Use the tree-sitter grammar if available.")]
_JsonOpt = Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")]


def _backend(use_grammar: bool) -> GrammarBackend | None:
    return load_backend() if use_grammar else None


def _add_branch(parent: Tree, block: Block) -> None:
    title = f"[bold]{escape(block.name)}[/bold] [dim]{block.start_line + 1}-{block.end_line + 1}[/dim]"
    if block.label:
        title += f" [cyan]{escape(block.label)}[/cyan]"
    branch = parent.add(title, highlight=False)
    for child in block.children or []:
        _add_branch(branch, child)


def blocks(
    path: _SourcePath,
    grammar: _GrammarOpt = True,
    as_json: _JsonOpt = False,
) -> None:
    """Print the block tree of a D2 file."""
    result = extract_blocks(path.read_text(encoding="utf-8"), _backend(grammar))
    if as_json:
        payload = [b.model_dump(by_alias=True, exclude_none=True) for b in result]
        typer.echo(json.dumps(payload, indent=2))
        return
    tree = Tree(f"[green]{path.name}[/green]")
    for block in result:
        _add_branch(tree, block)
    console.print(tree)
    console.print(f"({len(result)} blocks)")


def analyze(
    path: _SourcePath,
    grammar: _GrammarOpt = True,
    as_json: _JsonOpt = False,
) -> None:
    """Print metadata for every top-level block of a D2 file."""
    backend = _backend(grammar)
    rows = [(b, analyze_block(b.code, backend)) for b in extract_blocks(path.read_text(encoding="utf-8"), backend)]
    if as_json:
        payload = [{"name": b.name, **meta.model_dump(by_alias=True)} for b, meta in rows]
        typer.echo(json.dumps(payload, indent=2))
        return
    table = Table(show_lines=False)
    for header in ("name", "category", "shapes", "connections", "depth", "styles", "classes", "top"):
        table.add_column(header)
    for block, meta in rows:
        table.add_row(
            block.name,
            meta.category,
            str(meta.shape_count),
            str(meta.connection_count),
            str(meta.nesting_depth),
            "yes" if meta.has_styles else "",
            "yes" if meta.has_classes else "",
            ", ".join(meta.top_identifiers),
        )
    console.print(table)
    console.print(f"({len(rows)} rows)")


def lint(
    errors: Annotated[Path, typer.Argument(help="File holding compiler error output.", exists=True, dir_okay=False)],
    source: Annotated[Path, typer.Option(help="D2 file the errors refer to.", exists=True, dir_okay=False)],
    as_json: _JsonOpt = False,
) -> None:
    """Map d2 compiler error text to positions in a source file."""
    text = source.read_text(encoding="utf-8")
    document = TextDocument(text)
    diagnostics = map_diagnostics(errors.read_text(encoding="utf-8"), document)
    if as_json:
        typer.echo(json.dumps([d.model_dump(by_alias=True) for d in diagnostics], indent=2))
        return
    for diag in diagnostics:
        line_no = text.count("\n", 0, diag.from_) + 1
        location = f"{source.name}:{line_no} ({diag.from_}-{diag.to})"
        console.print(f"[red]{diag.severity}[/red] {escape(location)} {escape(diag.message)}")
    console.print(f"({len(diagnostics)} diagnostics)")
