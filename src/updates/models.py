"""Data models for update checks."""

from dataclasses import dataclass, field
from enum import Enum

from common.constants import COMPONENT_PATH_PREFIXES

from .git_utils import CommitDescriptor


class UpdateStatus(str, Enum):
    """Terminal states of one update check."""

    UNREACHABLE = "unreachable"
    UP_TO_DATE = "up_to_date"
    BEHIND = "behind"
    ERROR = "error"


@dataclass
class ChangeSet:
    """Divergence of the local checkout from its remote tracking branch.

    The three path lists are disjoint: diffs run without rename detection.
    """

    commits_behind: int
    new_paths: list[str] = field(default_factory=list)
    modified_paths: list[str] = field(default_factory=list)
    deleted_paths: list[str] = field(default_factory=list)
    commit_log: list[CommitDescriptor] = field(default_factory=list)
    component_prefixes: tuple[str, ...] = COMPONENT_PATH_PREFIXES

    def is_component_path(self, path: str) -> bool:
        return path.startswith(self.component_prefixes)

    def component_paths(self, paths: list[str]) -> list[str]:
        return [path for path in paths if self.is_component_path(path)]

    @property
    def new_components(self) -> list[str]:
        return self.component_paths(self.new_paths)

    @property
    def modified_components(self) -> list[str]:
        return self.component_paths(self.modified_paths)

    @property
    def deleted_components(self) -> list[str]:
        return self.component_paths(self.deleted_paths)

    @property
    def all_paths(self) -> list[str]:
        return [*self.new_paths, *self.modified_paths, *self.deleted_paths]

    @property
    def has_component_changes(self) -> bool:
        return bool(self.new_components or self.modified_components or self.deleted_components)

    def to_dict(self) -> dict:
        return {
            "commits_behind": self.commits_behind,
            "new_paths": list(self.new_paths),
            "modified_paths": list(self.modified_paths),
            "deleted_paths": list(self.deleted_paths),
            "commit_log": [commit.format() for commit in self.commit_log],
        }


@dataclass
class UpdateReport:
    """Outcome of one update check."""

    status: UpdateStatus
    message: str = ""
    change_set: ChangeSet | None = None

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "message": self.message,
            "change_set": self.change_set.to_dict() if self.change_set else None,
        }
