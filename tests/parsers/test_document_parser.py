"""Tests for the streaming context document parser."""

from unittest.mock import MagicMock, patch

import pytest

import flow_writer_core.parsers.document as document_parser
from flow_writer_core.documents import ContextDocument
from flow_writer_core.exceptions import InvalidMarkupError, MissingRequiredFieldError
from flow_writer_core.parsers import parse_document

META = """<meta>
    <title>T</title>
    <author>A</author>
    <created>C</created>
    <app name="App" version="2"/>
    <tags>one</tags>
    <description>D</description>
  </meta>"""


def _parse_sections(sections: str) -> ContextDocument:
    return parse_document(f"<context>{META}<sections>{sections}</sections></context>")


class TestParseDocument:
    """Full-document parsing."""

    def test_minimal_document(self, minimal_xml: str) -> None:
        """Test metadata, variables, sections and flow are all read."""
        doc = parse_document(minimal_xml)

        assert doc.meta.title == "Test Document"
        assert doc.meta.author == "Test Author"
        assert doc.meta.created == "2025-01-01"
        assert doc.meta.app_info.name == "TestApp"
        assert doc.meta.app_info.version == "1.0"
        assert doc.meta.tags == ["test", "sample"]
        assert doc.meta.description == "Test description"

        assert [(v.name, v.value) for v in doc.variables] == [("userName", "Jeremy"), ("goal", "Ship v1")]

        assert len(doc.sections) == 1
        section = doc.sections[0]
        assert section.id == "intent-1"
        assert section.section_type == "intent"
        assert section.ref_target is None
        assert section.content == "Hello ${userName}, goal: ${goal}, unknown: ${missing}"

        assert doc.flow_graph is not None
        assert doc.flow_graph.id == "flow-1"
        assert doc.flow_graph.version == "1.0"
        assert doc.flow_graph.title == "Test Flow"

    def test_flow_derived_fields_empty(self, minimal_xml: str) -> None:
        """Test that the parser leaves diagram extraction to later stages."""
        flow = parse_document(minimal_xml).flow_graph
        assert flow is not None
        assert flow.mermaid_code.startswith("```mermaid\nflowchart TD")
        assert flow.mermaid_code.endswith("```")
        assert flow.parsed_graph.nodes == []
        assert flow.parsed_graph.edges == []
        assert flow.node_refs == []

    def test_meta_only_document(self, meta_only_xml: str) -> None:
        """Test empty blocks and a missing flow."""
        doc = parse_document(meta_only_xml)
        assert doc.variables == []
        assert doc.sections == []
        assert doc.flow_graph is None
        assert doc.meta.tags == []

    def test_bytes_input_with_invalid_utf8(self) -> None:
        """Test that invalid byte sequences are replaced instead of failing."""
        xml = f"<context>{META.replace('<description>D</description>', '<description>caf__</description>')}</context>"
        data = xml.encode("utf-8").replace(b"caf__", b"caf\xff")

        doc = parse_document(data)
        assert doc.meta.description == "caf\ufffd"

    def test_blocks_in_any_order_and_unknown_elements(self) -> None:
        """Test block order independence and that unknown elements are skipped."""
        xml = f"""<context>
          <flow id="f" version="1"><diagram>graph TD</diagram></flow>
          <extra><note>ignored</note></extra>
          <sections><section id="s" type="process"><content>x</content></section></sections>
          {META}
          <variables><var name="a">1</var></variables>
        </context>"""
        doc = parse_document(xml)

        assert doc.meta.title == "T"
        assert doc.sections[0].id == "s"
        assert doc.variables[0].value == "1"
        assert doc.flow_graph is not None
        assert doc.flow_graph.mermaid_code == "graph TD"

    def test_declared_encoding_ignored_for_text(self) -> None:
        """Test that a non-UTF-8 declaration does not re-decode already decoded text."""
        meta = META.replace("<title>T</title>", "<title>café</title>")
        xml = f'<?xml version="1.0" encoding="ISO-8859-1"?>\n<context>{meta}</context>'

        assert parse_document(xml).meta.title == "café"

    def test_blocks_inside_unknown_wrapper(self) -> None:
        """Test that blocks are picked up below unknown wrapper elements."""
        xml = f"""<context>
          {META}
          <ext><flow id="wrapped" version="2"><diagram>graph LR</diagram></flow></ext>
        </context>"""
        flow = parse_document(xml).flow_graph

        assert flow is not None
        assert flow.id == "wrapped"
        assert flow.mermaid_code == "graph LR"

    def test_block_names_inside_a_block_are_not_blocks(self) -> None:
        """Test that a block-named element inside an open block is part of that block."""
        xml = f"""<context>
          {META}
          <flow id="f" version="1"><diagram>graph TD</diagram><meta>inner</meta></flow>
        </context>"""
        doc = parse_document(xml)

        assert doc.meta.title == "T"
        assert doc.flow_graph is not None
        assert doc.flow_graph.id == "f"

    def test_entities_unescaped(self) -> None:
        """Test that standard entities are decoded in text."""
        xml = f"<context>{META.replace('<title>T</title>', '<title>R &amp; D &lt;1&gt;</title>')}</context>"
        assert parse_document(xml).meta.title == "R & D <1>"


class TestMetadata:
    """Metadata block parsing."""

    def test_tags_trimmed_and_empty_entries_dropped(self) -> None:
        """Test tag splitting rules."""
        xml = f"<context>{META.replace('<tags>one</tags>', '<tags> a ,, b , </tags>')}</context>"
        assert parse_document(xml).meta.tags == ["a", "b"]

    def test_app_attributes_default_to_empty(self) -> None:
        """Test that missing app attributes become empty strings."""
        meta = META.replace('<app name="App" version="2"/>', "<app/>")
        xml = f"<context>{meta}</context>"
        app_info = parse_document(xml).meta.app_info
        assert app_info.name == ""
        assert app_info.version == ""

    def test_cdata_in_meta(self) -> None:
        """Test that CDATA is read verbatim and trimmed."""
        xml = f"<context>{META.replace('<description>D</description>', '<description><![CDATA[  <b>raw</b>  ]]></description>')}</context>"
        assert parse_document(xml).meta.description == "<b>raw</b>"


class TestVariables:
    """Variables block parsing."""

    def test_self_closing_var(self) -> None:
        """Test that a self-closing var has an empty value."""
        doc = parse_document(f'<context>{META}<variables><var name="empty"/><var name="x"> v </var></variables></context>')
        assert [(v.name, v.value) for v in doc.variables] == [("empty", ""), ("x", "v")]

    def test_duplicate_names_kept(self) -> None:
        """Test that duplicate variable names are stored as-is."""
        doc = parse_document(f'<context>{META}<variables><var name="a">1</var><var name="a">2</var></variables></context>')
        assert [v.value for v in doc.variables] == ["1", "2"]


class TestSections:
    """Sections block parsing."""

    def test_nested_sections_any_depth(self) -> None:
        """Test that the parser accepts nesting the validator rejects."""
        doc = _parse_sections(
            '<section id="a" type="intent"><content>A</content>'
            '<section id="b" type="process"><content>B</content>'
            '<section id="c" type="process"><content>C</content></section>'
            "</section></section>"
            '<section id="d" type="evaluation"><content>D</content></section>'
        )

        assert [s.id for s in doc.sections] == ["a", "d"]
        assert doc.sections[0].children[0].id == "b"
        assert doc.sections[0].children[0].children[0].content == "C"
        assert [s.id for s in doc.sections[0].walk()] == ["a", "b", "c"]

    def test_ref_target_and_missing_content(self) -> None:
        """Test refTarget attribute and content defaulting to empty."""
        doc = _parse_sections('<section id="e" type="evaluation" refTarget="a b"/>')
        section = doc.sections[0]
        assert section.ref_target == "a b"
        assert section.content == ""

    def test_plain_text_content_trimmed(self) -> None:
        """Test that non-CDATA content is trimmed."""
        doc = _parse_sections('<section id="s" type="intent"><content>\n   # Title\n   </content></section>')
        assert doc.sections[0].content == "# Title"


class TestFlow:
    """Flow block parsing."""

    def test_flow_without_title(self) -> None:
        """Test that a missing flow title is None."""
        doc = parse_document(f'<context>{META}<flow id="f" version="1"><diagram/></flow></context>')
        assert doc.flow_graph is not None
        assert doc.flow_graph.title is None
        assert doc.flow_graph.mermaid_code == ""


class TestErrors:
    """Parser failure modes."""

    def test_missing_meta(self) -> None:
        """Test that a document without metadata is rejected."""
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_document("<context><sections/></context>")
        assert exc_info.value.field == "meta"
        assert str(exc_info.value) == "Missing required field: meta"

    def test_meta_without_app(self) -> None:
        """Test that metadata must contain <app>."""
        meta = META.replace('<app name="App" version="2"/>', "")
        with pytest.raises(MissingRequiredFieldError) as exc_info:
            parse_document(f"<context>{meta}</context>")
        assert exc_info.value.field == "app"

    def test_syntax_error(self) -> None:
        """Test that mismatched tags raise InvalidMarkupError."""
        with pytest.raises(InvalidMarkupError):
            parse_document(f"<context>{META}<sections></variables></context>")

    def test_premature_end(self) -> None:
        """Test that truncated input raises InvalidMarkupError."""
        with pytest.raises(InvalidMarkupError):
            parse_document(f"<context>{META}<sections>")

    def test_repeated_block_last_wins(self) -> None:
        """Test that a repeated block replaces the earlier one and is logged."""
        xml = f"""<context>
          {META}
          <sections><section id="first" type="process"><content>1</content></section></sections>
          <sections><section id="second" type="process"><content>2</content></section></sections>
        </context>"""
        with patch.object(document_parser, "logger", MagicMock()) as mock_logger:
            doc = parse_document(xml)

        assert [s.id for s in doc.sections] == ["second"]
        mock_logger.warning.assert_called_once()
        assert "<sections>" in mock_logger.warning.call_args.args[0]

