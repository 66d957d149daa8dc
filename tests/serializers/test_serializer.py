"""Tests for context document serialization."""

import pytest

from flow_writer_core.documents import (
    AppInfo,
    ContextDocument,
    FlowGraph,
    MetaData,
    Section,
    Variable,
)
from flow_writer_core.exceptions import SerializationError
from flow_writer_core.parsers import enrich_flow_graph, parse_document
from flow_writer_core.serializers import serialize_document


def _document(**overrides) -> ContextDocument:
    fields = {
        "meta": MetaData(
            title="Plan",
            author="Author",
            created="2025-01-01",
            app_info=AppInfo(name="CEC", version="0.1.0"),
            tags=["context", "xml"],
            description="About",
        ),
        "variables": [Variable(name="goal", value="ship")],
        "sections": [Section(id="intent-1", type="intent", content="# Intent\n\nDo ${goal}")],
    }
    fields.update(overrides)
    return ContextDocument(**fields)


def _assert_round_trip(doc: ContextDocument) -> None:
    reloaded = parse_document(serialize_document(doc))
    assert reloaded.meta == doc.meta
    assert reloaded.variables == doc.variables
    assert reloaded.sections == doc.sections
    if doc.flow_graph is None:
        assert reloaded.flow_graph is None
    else:
        assert reloaded.flow_graph is not None
        assert reloaded.flow_graph.persisted() == doc.flow_graph.persisted()


class TestFormat:
    """Output layout."""

    def test_declaration_and_root(self):
        """Test the fixed first two lines."""
        lines = serialize_document(_document()).splitlines()
        assert lines[0] == '<?xml version="1.0" encoding="UTF-8"?>'
        assert lines[1] == '<context version="1.0">'

    def test_meta_block(self):
        """Test metadata rendering with joined tags and app attributes."""
        xml = serialize_document(_document())
        assert '    <app name="CEC" version="0.1.0"/>' in xml
        assert "    <tags>context, xml</tags>" in xml

    def test_section_body_in_padded_cdata(self):
        """Test that section content is stripped and wrapped in newlines."""
        doc = _document(sections=[Section(id="s", type="process", ref_target="a b", content="  body  ")])
        xml = serialize_document(doc)
        assert '    <section id="s" type="process" refTarget="a b">' in xml
        assert "      <content><![CDATA[\nbody\n]]></content>" in xml

    def test_variables_escaped(self):
        """Test base entity escaping of variable values."""
        doc = _document(variables=[Variable(name="v", value="a < b & c")])
        assert '<var name="v">a &lt; b &amp; c</var>' in serialize_document(doc)

    def test_deterministic(self, example_xml: str):
        """Test that serializing the same document twice is identical."""
        doc = parse_document(example_xml)
        assert serialize_document(doc) == serialize_document(doc)

    def test_derived_flow_state_not_written(self, example_xml: str):
        """Test that enrichment does not change the output."""
        doc = parse_document(example_xml)
        assert doc.flow_graph is not None
        enriched = doc.model_copy(update={"flow_graph": enrich_flow_graph(doc.flow_graph)})

        xml = serialize_document(enriched)

        assert xml == serialize_document(doc)
        assert "nodeType" not in xml

    def test_flow_block(self):
        """Test flow attributes, title and diagram CDATA."""
        flow = FlowGraph(id="flow-1", version="1.0", title="Flow", mermaid_code="graph TD\n  A --> B")
        xml = serialize_document(_document(flow_graph=flow))
        assert '  <flow id="flow-1" version="1.0">' in xml
        assert "    <title>Flow</title>" in xml
        assert "<diagram><![CDATA[\ngraph TD\n  A --> B\n]]></diagram>" in xml

    def test_flow_omitted_when_absent(self):
        """Test that no flow element is written without a flow graph."""
        assert "<flow" not in serialize_document(_document())


class TestRoundTrip:
    """serialize then parse preserves persisted state."""

    def test_example_document(self, example_xml: str):
        """Test the bundled example."""
        _assert_round_trip(parse_document(example_xml))

    def test_nested_sections(self):
        """Test that nesting survives although the validator rejects it."""
        child = Section(id="c", type="process", content="child")
        doc = _document(sections=[Section(id="p", type="intent", content="parent", children=[child])])
        _assert_round_trip(doc)

    def test_empty_document_parts(self):
        """Test empty variables, sections and metadata strings."""
        doc = _document(
            meta=MetaData(app_info=AppInfo(name="", version="")),
            variables=[Variable(name="empty")],
            sections=[],
        )
        _assert_round_trip(doc)

    def test_cdata_terminator_in_content(self):
        """Test content containing ']]>' falls back to escaped text."""
        doc = _document(sections=[Section(id="s", type="intent", content="a ]]> b")])
        xml = serialize_document(doc)
        assert "]]&gt;" in xml
        _assert_round_trip(doc)

    def test_tag_separator_is_lossy(self):
        """Test that a tag containing the separator splits on reload."""
        doc = _document(meta=MetaData(app_info=AppInfo(name="n", version="v"), tags=["a, b"]))
        assert parse_document(serialize_document(doc)).meta.tags == ["a", "b"]


class TestErrors:
    """Unrepresentable text."""

    def test_control_character_in_content(self):
        """Test that control characters raise SerializationError."""
        doc = _document(sections=[Section(id="s", type="intent", content="bad\x01char")])
        with pytest.raises(SerializationError):
            serialize_document(doc)

    def test_control_character_in_meta(self):
        """Test that control characters in metadata raise SerializationError."""
        doc = _document(meta=MetaData(title="bad\x02", app_info=AppInfo(name="n", version="v")))
        with pytest.raises(SerializationError, match="Cannot serialize"):
            serialize_document(doc)

    def test_character_outside_target_encoding(self):
        """Test that text the target encoding cannot hold raises SerializationError."""
        doc = _document(sections=[Section(id="s", type="intent", content="café")])
        with pytest.raises(SerializationError, match="Cannot serialize"):
            serialize_document(doc, "ascii")

    def test_unknown_encoding(self):
        """Test that an unknown codec name raises SerializationError."""
        with pytest.raises(SerializationError, match="Unknown encoding"):
            serialize_document(_document(), "no-such-codec")


class TestEncodingDeclaration:
    """Declaration line for the target encoding."""

    @pytest.mark.parametrize(
        ("encoding", "declared"),
        [
            ("utf-8", "UTF-8"),
            ("UTF8", "UTF-8"),
            ("latin-1", "ISO-8859-1"),
            ("ascii", "US-ASCII"),
            ("cp1252", "windows-1252"),
        ],
    )
    def test_declaration_names_encoding(self, encoding: str, declared: str):
        """Test that codec aliases map to the declared encoding name."""
        first_line = serialize_document(_document(), encoding).splitlines()[0]
        assert first_line == f'<?xml version="1.0" encoding="{declared}"?>'

    def test_latin1_text_reparses(self):
        """Test that Latin-1 output decodes and parses back to the same text."""
        doc = _document(meta=MetaData(title="café", app_info=AppInfo(name="n", version="v")))
        data = serialize_document(doc, "latin-1").encode("latin-1")

        assert parse_document(data.decode("latin-1")).meta.title == "café"
