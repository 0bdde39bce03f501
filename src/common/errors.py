"""Exceptions shared by the catalog client and the update checker."""


class CatalogToolError(Exception):
    """Base exception for catalog tool errors."""

    pass


class RemoteUnavailable(CatalogToolError):
    """Catalog endpoint unreachable or answered with a non-success status."""

    pass


class MalformedResponse(CatalogToolError):
    """Catalog endpoint returned invalid JSON or a document missing required fields."""

    pass


class NotFound(CatalogToolError):
    """Requested component has no document in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"Component {name!r} not found")
        self.name = name


class UpstreamUnreachable(CatalogToolError):
    """Fetching the git remote failed (offline, auth, network)."""

    pass


class DiffComputationError(CatalogToolError):
    """Counting or diffing commits failed unexpectedly."""

    pass
