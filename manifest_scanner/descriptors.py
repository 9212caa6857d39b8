"""Data models for the items and properties written to the manifest."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class PropertyDescriptor:
    """One member of a declaration's input shape."""

    name: str
    display_name: str
    type: str
    optional: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the manifest's field names."""
        return {
            "name": self.name,
            "displayName": self.display_name,
            "type": self.type,
            "optional": self.optional,
        }


@dataclass
class ItemDescriptor:
    """A discovered widget or payment gateway."""

    id: str
    name: str
    description: str = ""
    version: str | None = None
    source_location: str | None = None  # widgets only
    properties: list[PropertyDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the manifest's field names, omitting unset fields."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }
        if self.version is not None:
            data["version"] = self.version
        if self.source_location is not None:
            data["sourceLocation"] = self.source_location
        data["properties"] = [p.to_dict() for p in self.properties]
        return data
