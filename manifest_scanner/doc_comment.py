"""Data models for parsed documentation comments."""

from dataclasses import dataclass, field


@dataclass
class Tag:
    """A single ``@name value rest-of-line`` annotation."""

    name: str
    value: str = ""
    description: str = ""
    type: str = ""  # contents of an optional {type} token


@dataclass
class DocComment:
    """The tags and free-text description of one ``/** */`` block."""

    tags: list[Tag] = field(default_factory=list)
    description: str = ""

    def has_tag(self, *names: str) -> bool:
        """Check if any tag carries one of the given names."""
        return any(tag.name in names for tag in self.tags)
