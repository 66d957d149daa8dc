"""Context document root aggregate and metadata models."""

from pydantic import BaseModel, ConfigDict, Field

from .flow_graph import FlowGraph
from .section import Section


class AppInfo(BaseModel):
    """Name and version of the application that wrote the document."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    version: str


class MetaData(BaseModel):
    """Document metadata.

    @public

    Immutable once parsed. ``created`` is kept as an opaque string and never
    interpreted as a timestamp.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str = ""
    author: str = ""
    created: str = ""
    app_info: AppInfo
    tags: list[str] = Field(default_factory=list)
    description: str = ""


class Variable(BaseModel):
    """A named template value referenced from section content as ``${name}``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    value: str = ""


class ContextDocument(BaseModel):
    """A context document: metadata, variables, sections and an optional flow graph.

    @public

    Constructed fresh on every load and owned by the caller; nothing is
    cached between calls.

    Example:
        >>> doc = ContextDocument(
        ...     meta=MetaData(title="Plan", app_info=AppInfo(name="CEC", version="0.1.0")),
        ...     sections=[Section(id="intent-1", type="intent", content="Ship ${goal}")],
        ... )
        >>> doc.flow_graph is None
        True
    """

    model_config = ConfigDict(extra="forbid")

    meta: MetaData
    variables: list[Variable] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    flow_graph: FlowGraph | None = None


__all__ = ["AppInfo", "ContextDocument", "MetaData", "Variable"]
