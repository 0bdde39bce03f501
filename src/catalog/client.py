"""HTTP client for the remote component catalog."""

from typing import Any
from urllib.parse import quote

import requests

from common.constants import COMPONENTS_DIR, DEFAULT_HTTP_TIMEOUT, INDEX_DOCUMENT, USER_AGENT
from common.errors import MalformedResponse, NotFound, RemoteUnavailable
from common.logger import get_logger

from .models import ComponentSpec, ComponentSummary

logger = get_logger(__name__)


class CatalogClient:
    """Read-only client for a component catalog published as static JSON.

    The catalog is a directory with two document shapes:
    - ``index.json``: ``{"components": [{"name", "description", "tags"}, ...]}``
    - ``components/<name>.json``: the full spec of one component

    Nothing is cached: every call performs exactly one GET, and retrying is
    left to the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """Initialize catalog client.

        Args:
            base_url: URL of the catalog directory (no trailing slash needed)
            timeout: Seconds before a request fails as RemoteUnavailable
            session: Optional preconfigured session (tests inject their own)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    @property
    def index_url(self) -> str:
        return f"{self.base_url}/{INDEX_DOCUMENT}"

    def component_url(self, name: str) -> str:
        return f"{self.base_url}/{COMPONENTS_DIR}/{quote(name, safe='')}.json"

    def list_components(self) -> list[ComponentSummary]:
        """Fetch the catalog index.

        Returns:
            Component summaries in index order

        Raises:
            RemoteUnavailable: If the request fails or the status is not 2xx
            MalformedResponse: If the body is not a valid index document
        """
        response = self._get(self.index_url)
        if not _is_success(response):
            raise RemoteUnavailable(f"{response.status_code} {response.reason}")

        data = _decode_json(response, self.index_url)
        if not isinstance(data, dict) or not isinstance(data.get("components"), list):
            raise MalformedResponse(f"{self.index_url}: missing 'components' list")

        summaries = [_parse_summary(entry, self.index_url) for entry in data["components"]]
        logger.debug(f"Fetched {len(summaries)} components from catalog index")
        return summaries

    def get_component(self, name: str) -> ComponentSpec:
        """Fetch the full spec of one component.

        Any non-success status is reported as NotFound: the index is the
        source of truth for which components exist.

        Args:
            name: Component name as listed in the index (e.g. 'ChipsView')

        Returns:
            The component spec

        Raises:
            ValueError: If name is empty
            NotFound: If the status is not 2xx
            RemoteUnavailable: If the request itself fails
            MalformedResponse: If the body is not a JSON object for this component
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Component name must be a non-empty string")

        url = self.component_url(name)
        response = self._get(url)
        if not _is_success(response):
            logger.debug(f"Component {name} returned {response.status_code}")
            raise NotFound(name)

        document = _decode_json(response, url)
        if not isinstance(document, dict):
            raise MalformedResponse(f"{url}: expected a JSON object")

        declared = document.get("name", name)
        if declared != name:
            raise MalformedResponse(f"{url}: document name {declared!r} does not match {name!r}")

        tags = document.get("tags", [])
        return ComponentSpec(
            name=name,
            description=str(document.get("description") or ""),
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            document=document,
        )

    def search_components(self, query: str) -> list[ComponentSummary]:
        """Search the index by name or description.

        Matching is a case-insensitive substring test; the result keeps index
        order and an empty query matches everything.

        Args:
            query: Text to look for

        Returns:
            Matching summaries, possibly empty

        Raises:
            RemoteUnavailable: If the index cannot be fetched
            MalformedResponse: If the index is invalid
        """
        needle = query.lower()
        return [
            summary
            for summary in self.list_components()
            if needle in summary.name.lower() or needle in summary.description.lower()
        ]

    def _get(self, url: str) -> requests.Response:
        try:
            logger.debug(f"GET {url}")
            return self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise RemoteUnavailable(f"timeout after {self.timeout}s fetching {url}") from e
        except requests.exceptions.RequestException as e:
            raise RemoteUnavailable(str(e)) from e

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


def _decode_json(response: requests.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponse(f"{url}: body is not valid JSON") from e


def _parse_summary(entry: Any, url: str) -> ComponentSummary:
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise MalformedResponse(f"{url}: index entry without a string 'name'")

    tags = entry.get("tags", [])
    return ComponentSummary(
        name=entry["name"],
        description=str(entry.get("description") or ""),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        document=dict(entry),
    )
