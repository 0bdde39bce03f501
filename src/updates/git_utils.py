"""Thin wrappers around the git commands used by update checks."""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from common.constants import DEFAULT_GIT_TIMEOUT
from common.logger import get_logger

logger = get_logger(__name__)

DiffFilter = Literal["A", "M", "D"]

# Unit separator between log fields; subjects may contain anything else
_FIELD_SEP = "\x1f"


class GitError(RuntimeError):
    """Raised when a git command fails or times out."""


@dataclass(frozen=True)
class CommitDescriptor:
    """One commit of the upstream log."""

    short_hash: str
    subject: str
    author: str
    relative_time: str

    def format(self) -> str:
        return f"{self.short_hash} {self.subject} ({self.author}, {self.relative_time})"


class GitRepository:
    """Read-mostly access to a local checkout.

    Only fetch() writes anything, and only remote-tracking refs.
    """

    def __init__(self, root: Path, timeout: float = DEFAULT_GIT_TIMEOUT):
        self.root = Path(root)
        self.timeout = timeout

    def run(self, *args: str) -> str:
        """Run a git sub-command and return its stdout.

        Raises:
            GitError: On non-zero exit, timeout, or missing git executable
        """
        command = ["git", *args]
        logger.debug(f"Running {' '.join(command)} in {self.root}")
        try:
            completed = subprocess.run(
                command,
                cwd=self.root,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="surrogateescape",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise GitError(f"git {args[0]} timed out after {self.timeout}s") from e
        except OSError as e:
            raise GitError(f"could not run git in {self.root}: {e}") from e

        if completed.returncode != 0:
            raise GitError(completed.stderr.strip() or f"git {args[0]} failed")
        return completed.stdout

    def fetch(self, remote: str, branch: str) -> None:
        """Update the remote-tracking ref for one branch."""
        self.run("fetch", "--quiet", remote, branch)

    def count_commits(self, base: str, target: str) -> int:
        """Count commits reachable from target but not from base.

        Raises:
            GitError: If the refs cannot be resolved or the output is not a count
        """
        output = self.run("rev-list", "--count", f"{base}..{target}").strip()
        try:
            return int(output)
        except ValueError as e:
            raise GitError(f"unexpected rev-list output: {output!r}") from e

    def changed_paths(self, base: str, target: str, diff_filter: DiffFilter) -> list[str]:
        """List paths changed between two refs, one status only.

        Rename detection is off, so a moved file shows up as one delete and
        one add and the three statuses never overlap. Paths come back
        NUL-separated and unquoted, exactly as stored in the tree.
        """
        output = self.run(
            "diff",
            "--name-only",
            "-z",
            "--no-renames",
            f"--diff-filter={diff_filter}",
            f"{base}..{target}",
        )
        return [path for path in output.split("\0") if path]

    def log(self, base: str, target: str) -> list[CommitDescriptor]:
        """Commits reachable from target but not from base, newest first.

        Raises:
            GitError: If a commit record does not have the expected fields
        """
        output = self.run(
            "log",
            "-z",
            f"--format=%h{_FIELD_SEP}%s{_FIELD_SEP}%an{_FIELD_SEP}%ar",
            f"{base}..{target}",
        )

        commits: list[CommitDescriptor] = []
        for record in output.split("\0"):
            record = record.strip("\n")
            if not record:
                continue
            parts = record.split(_FIELD_SEP)
            if len(parts) != 4:
                raise GitError(f"unparsable log record: {record!r}")
            commits.append(CommitDescriptor(*parts))
        return commits
