"""Section tree model.

Sections are the addressable content blocks of a context document. The model
supports arbitrary nesting even though the schema validator only accepts flat
section lists; parser, resolver and serializer all follow the model.
"""

from collections.abc import Iterator
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

SECTION_TYPES: Final[tuple[str, ...]] = ("intent", "evaluation", "process", "alternatives")
"""Section types accepted by the schema validator, in display order."""


class Section(BaseModel):
    """A titled content block, addressable by id, organized as a tree.

    @public

    Attributes:
        id: Identifier, intended to be unique across the whole document.
        section_type: One of SECTION_TYPES (serialized as ``type``).
        content: Free-form markdown; may contain ``${name}`` placeholders.
        ref_target: Optional space-separated ids this section refers to
                    (serialized as ``refTarget``).
        children: Nested sections, owned exclusively by this section.

    Example:
        >>> section = Section(id="intent-1", type="intent", content="# Intent")
        >>> section.section_type
        'intent'
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: str
    section_type: str = Field(alias="type")
    content: str = ""
    ref_target: str | None = Field(default=None, alias="refTarget")
    children: list["Section"] = Field(default_factory=list)

    def walk(self) -> Iterator["Section"]:
        """Yield this section and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()


def iter_sections(sections: list[Section]) -> Iterator[Section]:
    """Yield every section of a forest in pre-order."""
    for section in sections:
        yield from section.walk()


__all__ = ["SECTION_TYPES", "Section", "iter_sections"]
