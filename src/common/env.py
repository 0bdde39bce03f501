"""Environment configuration interface for the component catalog tools.

This module centralizes all environment variable access in one place.
Components never read these directly: entry points build a Settings value
and pass it down explicitly.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from common.constants import (
    COMPONENT_PATH_PREFIXES,
    DEFAULT_BRANCH,
    DEFAULT_CATALOG_BASE_URL,
    DEFAULT_GIT_TIMEOUT,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_REMOTE,
)

# Load environment variables from .env file if it exists
load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def catalog_base_url() -> str:
        """Get the base URL of the remote catalog.

        Returns:
            Base URL without trailing slash
        """
        return os.getenv("CATALOG_BASE_URL", DEFAULT_CATALOG_BASE_URL).rstrip("/")

    @staticmethod
    def repo_root() -> Path:
        """Get the local git checkout that update checks run against.

        Returns:
            Repository root, defaults to the current directory
        """
        return Path(os.getenv("CATALOG_REPO_ROOT", "."))

    @staticmethod
    def remote() -> str:
        """Get the remote name, defaults to 'origin'."""
        return os.getenv("CATALOG_REMOTE", DEFAULT_REMOTE)

    @staticmethod
    def branch() -> str:
        """Get the tracked branch, defaults to 'main'."""
        return os.getenv("CATALOG_BRANCH", DEFAULT_BRANCH)

    @staticmethod
    def http_timeout() -> float:
        """Get the HTTP timeout in seconds, defaults to 10."""
        return float(os.getenv("CATALOG_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT)))

    @staticmethod
    def git_timeout() -> float:
        """Get the git command timeout in seconds, defaults to 15."""
        return float(os.getenv("CATALOG_GIT_TIMEOUT", str(DEFAULT_GIT_TIMEOUT)))

    @staticmethod
    def component_prefixes() -> tuple[str, ...]:
        """Get the path prefixes that mark component-relevant changes.

        Returns:
            Comma-separated CATALOG_COMPONENT_PREFIXES split into a tuple,
            defaults to ('components/', 'specs/')
        """
        raw = os.getenv("CATALOG_COMPONENT_PREFIXES")
        if raw is None:
            return COMPONENT_PATH_PREFIXES
        return tuple(prefix.strip() for prefix in raw.split(",") if prefix.strip())

    @staticmethod
    def log_level() -> str:
        """Get the log level, defaults to 'INFO'."""
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for convenient access
env = Environment()


@dataclass(frozen=True)
class Settings:
    """Resolved configuration passed explicitly to the catalog client and update checker."""

    base_url: str
    repo_root: Path
    remote: str
    branch: str
    http_timeout: float
    git_timeout: float
    component_prefixes: tuple[str, ...]
    log_level: str

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from the environment, then apply non-None overrides.

        Example:
            >>> Settings.from_env(branch="develop").branch
            'develop'
        """
        settings = cls(
            base_url=env.catalog_base_url(),
            repo_root=env.repo_root(),
            remote=env.remote(),
            branch=env.branch(),
            http_timeout=env.http_timeout(),
            git_timeout=env.git_timeout(),
            component_prefixes=env.component_prefixes(),
            log_level=env.log_level(),
        )
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "base_url" in changes:
            changes["base_url"] = changes["base_url"].rstrip("/")
        if "repo_root" in changes:
            changes["repo_root"] = Path(changes["repo_root"])
        return replace(settings, **changes)
