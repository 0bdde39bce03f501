"""Data models for catalog documents."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ComponentSummary:
    """One entry of the catalog index.

    ``document`` keeps the entry as published, so fields the index carries
    beyond name, description and tags survive into to_dict().
    """

    name: str
    description: str = ""
    tags: list[str] = field(default_factory=list)
    document: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.document,
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
        }


@dataclass
class ComponentSpec:
    """Full document for a single component.

    Carries the summary fields plus the raw document, which holds everything
    else the catalog publishes (properties, usage examples, ...).
    """

    name: str
    description: str
    tags: list[str]
    document: dict[str, Any]

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Fields beyond the index shape."""
        return {
            key: value
            for key, value in self.document.items()
            if key not in ("name", "description", "tags")
        }

    def summary(self) -> ComponentSummary:
        return ComponentSummary(name=self.name, description=self.description, tags=list(self.tags))

    def to_dict(self) -> dict[str, Any]:
        return {**self.document, "name": self.name}
