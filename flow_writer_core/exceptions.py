"""Exception hierarchy for Flow Writer Core.

This module defines the exception hierarchy used throughout the Flow Writer Core library.
All exceptions inherit from FlowWriterError, providing a consistent error handling interface.
Schema failures carry the offending identifier as an attribute so callers can
report it without parsing the message.
"""


class FlowWriterError(Exception):
    """Base exception for all Flow Writer Core errors."""


class DocumentIOError(FlowWriterError):
    """Raised when a context document cannot be read from or written to disk."""


class DocumentNotFoundError(DocumentIOError):
    """Raised when the context document file does not exist."""


class InvalidMarkupError(FlowWriterError):
    """Raised when the document cannot be read as XML (syntax error, premature end)."""


class MissingRequiredFieldError(FlowWriterError):
    """Raised when a structurally required block or element is absent after parsing."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class SchemaValidationError(FlowWriterError):
    """Base exception for structural schema violations."""


class SchemaParseError(SchemaValidationError):
    """Raised when the validator cannot build a tree from the markup."""


class SchemaStructureError(SchemaValidationError):
    """Raised when a required element or attribute is missing, or the root is wrong."""

    def __init__(self, message: str, element: str = ""):
        self.element = element
        super().__init__(message)


class MissingSectionAttributeError(SchemaValidationError):
    """Raised when a section lacks its id or type attribute."""

    def __init__(self, attribute: str, section_id: str | None = None):
        self.attribute = attribute
        self.section_id = section_id
        if section_id is None:
            message = f"Section must have '{attribute}' attribute"
        else:
            message = f"Section '{section_id}' must have '{attribute}' attribute"
        super().__init__(message)


class InvalidSectionTypeError(SchemaValidationError):
    """Raised when a section type is outside the allowed vocabulary."""

    def __init__(self, section_id: str, section_type: str, allowed: tuple[str, ...]):
        self.section_id = section_id
        self.section_type = section_type
        self.allowed = allowed
        super().__init__(
            f"Section '{section_id}' has invalid type '{section_type}'. "
            f"Allowed types: {', '.join(allowed)}"
        )


class DuplicateSectionIdError(SchemaValidationError):
    """Raised when two sections share the same id."""

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(f"Duplicate section ID '{section_id}' found. Section IDs must be unique.")


class MissingSectionContentError(SchemaValidationError):
    """Raised when a section has no content element."""

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(f"Section '{section_id}' must have a 'content' element")


class NestedSectionError(SchemaValidationError):
    """Raised when a section contains another section."""

    def __init__(self, section_id: str):
        self.section_id = section_id
        super().__init__(
            f"Section '{section_id}' contains nested sections. Section nesting is not allowed - "
            "all sections must be direct children of <sections>."
        )


class SerializationError(FlowWriterError):
    """Raised when a document cannot be rendered back to XML."""
