"""CLI for marginalia: list, search and annotate highlights in a Markdown file."""

import json
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from marginalia.config import load_custom_patterns, resolve_pattern_file
from marginalia.core.footnotes.resolver import insert_inline_footnote
from marginalia.core.markup.scanner import scan_annotations
from marginalia.core.search.evaluator import (
    filter_annotations,
    label_from_path,
    no_collections,
    tags_from_footnotes,
)
from marginalia.core.search.parser import parse_query, tokens_from_query
from marginalia.errors import AnnotationNotFoundError
from marginalia.logging_config import configure_logging
from marginalia.models.annotation import Annotation, AnnotationDescriptor, AnnotationKind
from marginalia.models.pattern import CustomPattern

app = typer.Typer(help="Marginalia: find and query highlights and comments in Markdown notes.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write debug logs to this file"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, quiet=quiet, log_file=log_file)


def _read_document(path: Path) -> str:
    if not path.is_file():
        logger.error("File not found: {}", path)
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8")


def _patterns(patterns_file: Path | None) -> list[CustomPattern]:
    source = patterns_file or resolve_pattern_file()
    if source is None:
        return []
    logger.debug("Loading custom patterns from {}", source)
    return load_custom_patterns(source)


def _to_dict(annotation: Annotation) -> dict[str, object]:
    return {
        "text": annotation.text,
        "kind": annotation.kind.value,
        "start": annotation.start_offset,
        "end": annotation.end_offset,
        "color": annotation.color,
        "footnotes": list(annotation.footnote_contents),
    }


def _echo_annotations(annotations: list[Annotation], *, output_json: bool) -> None:
    if output_json:
        typer.echo(json.dumps([_to_dict(a) for a in annotations], indent=2, ensure_ascii=False))
        return
    for a in annotations:
        color = f" {a.color}" if a.color else ""
        typer.echo(f"  [{a.kind.value}{color}] {a.text[:80]}")
        for note in a.footnote_contents:
            typer.echo(f"    note: {note[:60]}")
        typer.echo(f"    offset={a.start_offset}")


@app.command()
def scan(
    file: Path = typer.Argument(..., help="Markdown file to scan"),
    patterns_file: Annotated[
        Path | None,
        typer.Option("--patterns", "-p", help="JSON file with custom highlight patterns"),
    ] = None,
    merge_comments: bool = typer.Option(
        False, "--merge-comments", "-m", help="Fold adjacent comments into highlight notes"
    ),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List the annotations in a file."""
    content = _read_document(file)
    annotations = scan_annotations(
        content,
        custom_patterns=_patterns(patterns_file),
        merge_adjacent_comments=merge_comments,
    )
    if not output_json:
        typer.echo(f"Found {len(annotations)} annotations:\n")
    _echo_annotations(annotations, output_json=output_json)


@app.command()
def search(
    file: Path = typer.Argument(..., help="Markdown file to search"),
    query: str = typer.Argument(..., help="Search query, e.g. '#todo OR @reading'"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show the annotations of a file that match a query."""
    content = _read_document(file)
    label = label_from_path(str(file))
    matches = filter_annotations(
        parse_query(query),
        scan_annotations(content, custom_patterns=_patterns(None)),
        tags_from_footnotes,
        no_collections,
        label_of=lambda _a: label,
    )
    if not output_json:
        typer.echo(f"Found {len(matches)} matching annotations:\n")
    _echo_annotations(matches, output_json=output_json)


@app.command()
def tokens(
    query: str = typer.Argument(..., help="Search query"),
) -> None:
    """Show how a query is understood, one term per line."""
    for token in tokens_from_query(query):
        prefix = "-" if token.exclude else ""
        typer.echo(f"{token.kind}\t{prefix}{token.value}")


@app.command()
def comment(
    file: Path = typer.Argument(..., help="Markdown file to edit"),
    text: str = typer.Argument(..., help="Text of the annotation to comment on"),
    offset: int = typer.Option(0, "--offset", "-o", help="Approximate start offset"),
    kind: AnnotationKind = typer.Option(
        AnnotationKind.MARKDOWN_HIGHLIGHT, "--kind", "-k", help="Annotation kind"
    ),
    full_match: Annotated[
        str | None,
        typer.Option("--full-match", help="Exact markup of a custom-pattern annotation"),
    ] = None,
    note: str = typer.Option("", "--content", "-c", help="Footnote text"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the result instead of writing"),
) -> None:
    """Add an inline footnote after an annotation."""
    content = _read_document(file)
    descriptor = AnnotationDescriptor(kind=kind, text=text, full_match=full_match)
    try:
        insertion = insert_inline_footnote(content, descriptor, offset, note)
    except AnnotationNotFoundError as exc:
        logger.error("{}", exc)
        raise typer.Exit(1) from exc

    if dry_run:
        typer.echo(insertion.content, nl=False)
        return
    file.write_text(insertion.content, encoding="utf-8")
    typer.echo(f"Inserted footnote at offset {insertion.offset}")
