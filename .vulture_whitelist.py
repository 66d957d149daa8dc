"""Vulture whitelist: names used by frameworks or entry points, not direct code."""

# Console script entry point (pyproject [project.scripts])
from flow_writer_core.cli import main

main

# Shape vocabulary declared for the wire format; only some members are produced today
from flow_writer_core.documents.flow_graph import NodeType

NodeType.STADIUM
NodeType.SUBROUTINE
NodeType.CYLINDRICAL
NodeType.CIRCLE
NodeType.ASYMMETRIC
NodeType.RHOMBUS
NodeType.HEXAGON
NodeType.PARALLELOGRAM
NodeType.TRAPEZOID

# pydantic-settings configuration, read by pydantic
from flow_writer_core.settings import Settings

Settings.model_config
