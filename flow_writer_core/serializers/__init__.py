"""Writers for the context document file format."""

from .document import serialize_document

__all__ = ["serialize_document"]
