"""Default document path lookup."""

from pathlib import Path

from flow_writer_core.settings import settings


def get_document_path() -> Path | None:
    """Return the configured context document path, or None.

    @public

    Reads ``FLOW_WRITER_DOC_PATH`` (via settings). None means no path is
    configured and the caller should ask the user for one.
    """
    if not settings.doc_path:
        return None
    return Path(settings.doc_path)


__all__ = ["get_document_path"]
