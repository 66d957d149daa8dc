#!/usr/bin/env python3
"""Showcase of flow_writer_core features

This example walks through the public API on the bundled context document:
  • Settings and logging configuration (FLOW_WRITER_* environment variables)
  • Loading metadata and the variable-resolved section tree
  • Loading the flow graph with nodes linked to sections via click actions
  • Reporting placeholders that have no variable value
  • Editing sections and saving them to a copy of the document
  • Round-tripping through serialize_document / parse_document

Usage:
  # Use the bundled example
  python examples/showcase.py

  # Use your own document, saving the edited copy to ./out
  python examples/showcase.py path/to/context.xml --output ./out

Tip: Set FLOW_WRITER_LOG_LEVEL=DEBUG to see unresolved placeholders and
unlinked click targets.
"""

import argparse
import asyncio
import shutil
import tempfile
from pathlib import Path

from flow_writer_core import (
    LoggingConfig,
    Section,
    get_pipeline_logger,
    load_context_document,
    load_flow_graph,
    load_metadata,
    load_sections,
    parse_document,
    save_document,
    serialize_document,
    settings,
)
from flow_writer_core.processing import build_variable_map, unresolved_placeholders

logger = get_pipeline_logger("flow_writer_core.showcase")

EXAMPLE_DOCUMENT = Path(__file__).parent / "context-example.xml"


async def show_document(path: Path) -> None:
    """Print metadata, sections and the flow graph of a document."""
    meta = await load_metadata(path)
    print(f"{meta.title} by {meta.author} ({meta.app_info.name} {meta.app_info.version})")
    print(f"  Tags: {', '.join(meta.tags)}")

    for section in await load_sections(path):
        first_line = section.content.splitlines()[0] if section.content else ""
        print(f"  [{section.section_type}] {section.id}: {first_line}")

    flow = await load_flow_graph(path)
    if flow is None:
        print("  No flow graph")
        return

    print(f"\n  Flow '{flow.title or flow.id}' v{flow.version}")
    for node in flow.parsed_graph.nodes:
        target = f" -> #{node.ref_section_id}" if node.ref_section_id else ""
        print(f"    {node.id} ({node.node_type}) {node.label}{target}")
    for edge in flow.parsed_graph.edges:
        label = f" [{edge.label}]" if edge.label else ""
        print(f"    {edge.source} --> {edge.target}{label}")


async def edit_and_save(source: Path, output_dir: Path) -> Path:
    """Append a section to a copy of the document and save it."""
    output_dir.mkdir(parents=True, exist_ok=True)
    copy = output_dir / source.name
    shutil.copyfile(source, copy)

    document = await load_context_document(copy)
    missing = unresolved_placeholders(document.sections, build_variable_map(document.variables))
    if missing:
        logger.info(f"Placeholders without a value: {missing}")

    sections = [
        *document.sections,
        Section(id="alts-2", type="alternatives", content="# Alternatives\n\nAsk ${userName} about ${owner}."),
    ]
    await save_document(copy, sections)
    logger.info(f"Saved {len(sections)} sections to {copy}")
    return copy


async def run(path: Path, output_dir: Path) -> None:
    await show_document(path)

    copy = await edit_and_save(path, output_dir)
    print(f"\nEdited copy: {copy}")
    await show_document(copy)

    text = copy.read_text(encoding=settings.file_encoding)
    reparsed = parse_document(text)
    assert serialize_document(reparsed, settings.file_encoding) == text
    print("\nRound trip: serialize(parse(file)) reproduces the saved file")


def main():
    """Main entry point."""
    logging_config = LoggingConfig()
    logging_config.apply()

    parser = argparse.ArgumentParser(description="flow_writer_core showcase")
    default_path = Path(settings.doc_path) if settings.doc_path else EXAMPLE_DOCUMENT
    parser.add_argument("path", type=Path, nargs="?", default=default_path, help="Context document")
    parser.add_argument("--output", type=Path, default=None, help="Directory for the edited copy")
    args = parser.parse_args()

    output_dir = args.output or Path(tempfile.mkdtemp(prefix="flow-writer-"))
    asyncio.run(run(args.path, output_dir))


if __name__ == "__main__":
    main()
