"""Command-line access to context documents.

Each subcommand takes an optional document path; without one the path comes
from ``FLOW_WRITER_DOC_PATH``. Results are printed as JSON using the wire
field names (``type``, ``refTarget``, ``nodeType``, ``from``, ``to``).
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .documents import Section
from .exceptions import FlowWriterError
from .logging import setup_logging
from .pipeline import (
    get_document_path,
    load_context_document,
    load_flow_graph,
    load_metadata,
    load_sections,
    save_document,
)

EXIT_ERROR = 1
EXIT_USAGE = 2

_SECTIONS_ADAPTER: TypeAdapter[list[Section]] = TypeAdapter(list[Section])


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _resolve_path(args: argparse.Namespace) -> Path | None:
    if args.path is not None:
        return args.path
    return get_document_path()


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_sections(path: Path, args: argparse.Namespace) -> int:
    """Print the resolved section tree."""
    sections = asyncio.run(load_sections(path))
    _print_json(_SECTIONS_ADAPTER.dump_python(sections, mode="json", by_alias=True))
    return 0


def _cmd_flow(path: Path, args: argparse.Namespace) -> int:
    """Print the enriched flow graph, or null."""
    flow = asyncio.run(load_flow_graph(path))
    _print_json(None if flow is None else flow.model_dump(mode="json", by_alias=True))
    return 0


def _cmd_meta(path: Path, args: argparse.Namespace) -> int:
    """Print document metadata."""
    meta = asyncio.run(load_metadata(path))
    _print_json(meta.model_dump(mode="json", by_alias=True))
    return 0


def _cmd_validate(path: Path, args: argparse.Namespace) -> int:
    """Validate and parse the document."""
    asyncio.run(load_context_document(path))
    print("OK")
    return 0


def _cmd_save(path: Path, args: argparse.Namespace) -> int:
    """Replace the document's sections with a JSON array read from a file."""
    try:
        sections = _SECTIONS_ADAPTER.validate_json(args.from_json.read_bytes())
    except OSError as e:
        print(f"Error: cannot read {args.from_json}: {e}", file=sys.stderr)
        return EXIT_ERROR
    except ValidationError as e:
        print(f"Error: invalid sections JSON in {args.from_json}:\n{e}", file=sys.stderr)
        return EXIT_ERROR

    asyncio.run(save_document(path, sections))
    print(f"Saved {len(sections)} section(s) to {path}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for context document operations."""
    parser = argparse.ArgumentParser(prog="flow-writer", description="Context document CLI")
    parser.add_argument("--log-level", default=None, help="Log level for flow_writer_core (DEBUG, INFO, ...)")
    subparsers = parser.add_subparsers(dest="command")

    path_help = "Context document path (default: $FLOW_WRITER_DOC_PATH)"

    sections_parser = subparsers.add_parser("sections", help="Print the section tree as JSON")
    sections_parser.add_argument("path", type=Path, nargs="?", help=path_help)

    flow_parser = subparsers.add_parser("flow", help="Print the flow graph as JSON")
    flow_parser.add_argument("path", type=Path, nargs="?", help=path_help)

    meta_parser = subparsers.add_parser("meta", help="Print document metadata as JSON")
    meta_parser.add_argument("path", type=Path, nargs="?", help=path_help)

    validate_parser = subparsers.add_parser("validate", help="Check that a document loads")
    validate_parser.add_argument("path", type=Path, nargs="?", help=path_help)

    save_parser = subparsers.add_parser("save", help="Replace the sections of a document")
    save_parser.add_argument("path", type=Path, help="Context document path")
    save_parser.add_argument("--from-json", type=Path, required=True, help="JSON file with an array of sections")

    args = parser.parse_args(argv)

    handlers = {
        "sections": _cmd_sections,
        "flow": _cmd_flow,
        "meta": _cmd_meta,
        "validate": _cmd_validate,
        "save": _cmd_save,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return EXIT_ERROR

    setup_logging(level=args.log_level)

    path = _resolve_path(args)
    if path is None:
        print("Error: no document path given and FLOW_WRITER_DOC_PATH is not set", file=sys.stderr)
        return EXIT_USAGE

    try:
        return handler(path, args)
    except FlowWriterError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


__all__ = ["main"]
