"""Operation boundary: every catalog and update call ends in an OperationResult.

Nothing raised by the catalog client or the update checker escapes from
here; callers only render ``result.text``.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from catalog.client import CatalogClient
from common.env import Settings
from common.errors import MalformedResponse, NotFound, RemoteUnavailable
from common.logger import get_logger
from updates.checker import UpdateChecker, render_report
from updates.models import UpdateStatus

logger = get_logger(__name__)


@dataclass
class OperationResult:
    """Tagged success/failure value returned by every operation."""

    ok: bool
    text: str
    error_code: str | None = None
    data: Any = None

    @classmethod
    def success(cls, data: Any, text: str | None = None) -> "OperationResult":
        if text is None:
            text = json.dumps(data, indent=2, ensure_ascii=False)
        return cls(ok=True, text=text, data=data)

    @classmethod
    def failure(cls, error_code: str, text: str) -> "OperationResult":
        return cls(ok=False, text=text, error_code=error_code)


class CatalogOperations:
    """The four operations the tool server and CLI expose."""

    def __init__(self, client: CatalogClient, checker: UpdateChecker):
        self.client = client
        self.checker = checker

    @classmethod
    def from_settings(cls, settings: Settings) -> "CatalogOperations":
        client = CatalogClient(settings.base_url, timeout=settings.http_timeout)
        checker = UpdateChecker.for_path(
            settings.repo_root,
            settings.git_timeout,
            remote=settings.remote,
            branch=settings.branch,
            component_prefixes=settings.component_prefixes,
        )
        return cls(client, checker)

    def list_components(self) -> OperationResult:
        def run() -> OperationResult:
            summaries = self.client.list_components()
            return OperationResult.success([summary.to_dict() for summary in summaries])

        return _guard(run, "Failed to fetch component index")

    def get_component(self, name: str) -> OperationResult:
        def run() -> OperationResult:
            try:
                spec = self.client.get_component(name)
            except ValueError:
                return OperationResult.failure(
                    "invalid_argument", "Component name must be a non-empty string."
                )
            except NotFound:
                return OperationResult.failure(
                    "not_found",
                    f'Component "{name}" not found. '
                    "Use list_components to see available components.",
                )
            return OperationResult.success(spec.to_dict())

        return _guard(run, f'Failed to fetch component "{name}"')

    def search_components(self, query: str) -> OperationResult:
        def run() -> OperationResult:
            matches = [summary.to_dict() for summary in self.client.search_components(query)]
            if not matches:
                return OperationResult.success(
                    matches, text=f'No components found matching "{query}".'
                )
            return OperationResult.success(matches)

        return _guard(run, "Failed to fetch component index")

    def check_updates(self) -> OperationResult:
        report = self.checker.check()
        text = render_report(report)
        if report.status is UpdateStatus.ERROR:
            return OperationResult(
                ok=False, text=text, error_code="diff_failed", data=report.to_dict()
            )

        # Unreachable is informational, not a failure
        result = OperationResult.success(report.to_dict(), text=text)
        if report.status is UpdateStatus.UNREACHABLE:
            result.error_code = "upstream_unreachable"
        return result

    def close(self) -> None:
        self.client.close()


def _guard(run: Callable[[], OperationResult], unavailable_prefix: str) -> OperationResult:
    """Convert catalog exceptions into failure results."""
    try:
        return run()
    except RemoteUnavailable as e:
        logger.warning(f"{unavailable_prefix}: {e}")
        return OperationResult.failure("remote_unavailable", f"{unavailable_prefix}: {e}")
    except MalformedResponse as e:
        logger.error(f"Malformed catalog response: {e}")
        return OperationResult.failure("malformed_response", f"Malformed catalog response: {e}")
