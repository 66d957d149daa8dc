"""Core configuration settings for context document operations.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings. All variables share the ``FLOW_WRITER_`` prefix.

Environment variables:
    FLOW_WRITER_DOC_PATH: Context document to open when no path is given
    FLOW_WRITER_ATOMIC_SAVE: Write saves to a temporary file and rename it into place
    FLOW_WRITER_FILE_ENCODING: Text encoding used to read and write documents

Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values

Example:
    >>> from flow_writer_core.settings import settings
    >>> print(settings.doc_path)
    >>>
    >>> # Settings are frozen after initialization
    >>> settings.doc_path = "other.xml"  # Raises error

Note:
    Settings are loaded once at module import and frozen. The process must be
    restarted to pick up changes to environment variables or the .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core configuration for the context document pipeline.

    @public

    Attributes:
        doc_path: Default context document path. Empty means "no path
                  configured"; callers should ask the user for one.

        atomic_save: When true, saves write a temporary file in the target
                     directory and replace the document with it. Off by
                     default, in which case a save is a plain full overwrite.

        file_encoding: Encoding for reading and writing documents. Invalid
                       byte sequences are replaced on read.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOW_WRITER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    doc_path: str = ""
    atomic_save: bool = False
    file_encoding: str = "utf-8"


settings = Settings()
"""Global settings instance.

@public

Example:
    >>> from flow_writer_core.settings import settings
    >>> if not settings.doc_path:
    ...     print("No document configured")
"""
