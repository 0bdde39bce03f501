"""Ordered tool registration and dispatch."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from .operations import CatalogOperations, OperationResult

ToolHandler = Callable[[dict[str, Any]], OperationResult]


class ToolArgumentError(Exception):
    """Tool is unknown or its arguments do not match the schema."""


@dataclass(frozen=True)
class Tool:
    """A named handler with the metadata advertised by tools/list."""

    name: str
    description: str
    handler: ToolHandler
    input_schema: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolRegistry:
    """In-memory tool registry preserving insertion order."""

    _tools: dict[str, Tool] = field(default_factory=dict)

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._tools)

    def describe(self) -> list[dict[str, Any]]:
        return [tool.describe() for tool in self._tools.values()]

    def dispatch(self, name: str, arguments: dict[str, Any]) -> OperationResult:
        tool = self.get(name)
        if tool is None:
            raise ToolArgumentError(f"Unknown tool: {name}")
        return tool.handler(arguments)


def _string_argument(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str):
        raise ToolArgumentError(f"Argument '{key}' must be a string")
    return value


def _string_schema(key: str, description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {key: {"type": "string", "description": description}},
        "required": [key],
    }


def build_registry(operations: CatalogOperations) -> ToolRegistry:
    """Register the catalog tools in the order tools/list reports them."""
    registry = ToolRegistry()
    registry.register(
        Tool(
            name="list_components",
            description="List all available components with their descriptions",
            handler=lambda arguments: operations.list_components(),
        )
    )
    registry.register(
        Tool(
            name="get_component",
            description=(
                "Get full specification for a component including properties, "
                "usage examples, and tags"
            ),
            handler=lambda arguments: operations.get_component(
                _string_argument(arguments, "name")
            ),
            input_schema=_string_schema("name", "Component name (e.g., ChipsView)"),
        )
    )
    registry.register(
        Tool(
            name="search_components",
            description="Search for components by keyword (matches name or description)",
            handler=lambda arguments: operations.search_components(
                _string_argument(arguments, "query")
            ),
            input_schema=_string_schema("query", "Search query"),
        )
    )
    registry.register(
        Tool(
            name="check_updates",
            description="Check for upstream changes in the component library",
            handler=lambda arguments: operations.check_updates(),
        )
    )
    return registry
