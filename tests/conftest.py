"""Common test fixtures for context document tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

EXAMPLE_DOCUMENT = Path(__file__).resolve().parent.parent / "examples" / "context-example.xml"

MINIMAL_XML = """<?xml version="1.0" encoding="UTF-8"?>
<context version="1.0">
  <meta>
    <title>Test Document</title>
    <author>Test Author</author>
    <created>2025-01-01</created>
    <app name="TestApp" version="1.0"/>
    <tags>test, sample</tags>
    <description>Test description</description>
  </meta>
  <variables>
    <var name="userName">Jeremy</var>
    <var name="goal">Ship v1</var>
  </variables>
  <sections>
    <section id="intent-1" type="intent">
      <content><![CDATA[
Hello ${userName}, goal: ${goal}, unknown: ${missing}
]]></content>
    </section>
  </sections>
  <flow id="flow-1" version="1.0">
    <title>Test Flow</title>
    <diagram><![CDATA[
```mermaid
flowchart TD
  A[Intent] --> B[Evaluation]
  B --> C[Process]
  click A "#intent-1" "Open intent"
```
]]></diagram>
  </flow>
</context>
"""

META_ONLY_XML = """<context version="1.0">
  <meta>
    <title>T</title>
    <author>A</author>
    <created>C</created>
    <app name="App" version="2"/>
    <tags></tags>
    <description>D</description>
  </meta>
  <variables/>
  <sections/>
</context>
"""


@pytest.fixture
def minimal_xml() -> str:
    """Small valid document with two variables, one section and a flow."""
    return MINIMAL_XML


@pytest.fixture
def meta_only_xml() -> str:
    """Valid document with metadata only: no variables, sections or flow."""
    return META_ONLY_XML


@pytest.fixture
def example_xml() -> str:
    """The bundled example document."""
    return EXAMPLE_DOCUMENT.read_text(encoding="utf-8")


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing XML text to a file under tmp_path and returning its path."""

    def _write(content: str, name: str = "context.xml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
