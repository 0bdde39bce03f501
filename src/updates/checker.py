"""Report how far a local checkout has fallen behind its remote branch.

One check runs these steps, each terminal state ending it early:

    fetch remote ref      -> unreachable (graceful, never raised)
    count commits behind  -> up to date (no diff commands issued)
    diff A / M / D paths
    read commit log       -> behind

Failures after the fetch are reported as an error outcome carrying the
underlying git message.
"""

from pathlib import Path

from common.constants import COMPONENT_PATH_PREFIXES, DEFAULT_BRANCH, DEFAULT_REMOTE
from common.errors import DiffComputationError, UpstreamUnreachable
from common.logger import get_logger

from .git_utils import GitError, GitRepository
from .models import ChangeSet, UpdateReport, UpdateStatus

logger = get_logger(__name__)

UNREACHABLE_MESSAGE = "Could not fetch from remote."
UP_TO_DATE_MESSAGE = "Up to date: no new changes on remote."
REPORT_TITLE = "Component catalog"


class UpdateChecker:
    """Compare local HEAD with ``<remote>/<branch>`` after fetching it."""

    def __init__(
        self,
        repo: GitRepository,
        remote: str = DEFAULT_REMOTE,
        branch: str = DEFAULT_BRANCH,
        component_prefixes: tuple[str, ...] = COMPONENT_PATH_PREFIXES,
    ):
        self.repo = repo
        self.remote = remote
        self.branch = branch
        self.component_prefixes = tuple(component_prefixes)

    @classmethod
    def for_path(cls, repo_root: Path, git_timeout: float, **kwargs) -> "UpdateChecker":
        return cls(GitRepository(repo_root, timeout=git_timeout), **kwargs)

    @property
    def tracking_ref(self) -> str:
        return f"{self.remote}/{self.branch}"

    def check(self) -> UpdateReport:
        """Run one update check.

        Returns:
            UpdateReport in one of the UpdateStatus states; never raises for
            git failures.
        """
        try:
            self._fetch()
        except UpstreamUnreachable as e:
            logger.info(f"Remote {self.remote} unreachable: {e}")
            return UpdateReport(status=UpdateStatus.UNREACHABLE, message=UNREACHABLE_MESSAGE)

        try:
            change_set = self.compute_change_set()
        except DiffComputationError as e:
            logger.error(f"Update check failed in {self.repo.root}: {e}", exc_info=True)
            return UpdateReport(status=UpdateStatus.ERROR, message=str(e))

        if change_set is None:
            return UpdateReport(status=UpdateStatus.UP_TO_DATE, message=UP_TO_DATE_MESSAGE)

        logger.info(f"{change_set.commits_behind} commit(s) behind {self.tracking_ref}")
        return UpdateReport(
            status=UpdateStatus.BEHIND,
            message=f"{change_set.commits_behind} commit(s) behind remote",
            change_set=change_set,
        )

    def compute_change_set(self) -> ChangeSet | None:
        """Diff HEAD against the tracking ref as it currently stands.

        Returns:
            The ChangeSet, or None when HEAD already contains the tracking ref

        Raises:
            DiffComputationError: If any git command fails
        """
        try:
            behind = self.repo.count_commits("HEAD", self.tracking_ref)
            if behind == 0:
                return None

            return ChangeSet(
                commits_behind=behind,
                new_paths=self.repo.changed_paths("HEAD", self.tracking_ref, "A"),
                modified_paths=self.repo.changed_paths("HEAD", self.tracking_ref, "M"),
                deleted_paths=self.repo.changed_paths("HEAD", self.tracking_ref, "D"),
                commit_log=self.repo.log("HEAD", self.tracking_ref),
                component_prefixes=self.component_prefixes,
            )
        except GitError as e:
            raise DiffComputationError(str(e)) from e

    def _fetch(self) -> None:
        try:
            self.repo.fetch(self.remote, self.branch)
        except GitError as e:
            raise UpstreamUnreachable(str(e)) from e


def render_report(report: UpdateReport) -> str:
    """Render an update report as a markdown text block."""
    if report.status is UpdateStatus.ERROR:
        return f"Error: {report.message}"
    if report.change_set is None:
        return report.message

    change_set = report.change_set
    lines = [f"## {REPORT_TITLE}: {change_set.commits_behind} commit(s) behind remote", ""]

    if change_set.has_component_changes:
        for label, paths in (
            ("New", change_set.new_components),
            ("Modified", change_set.modified_components),
            ("Deleted", change_set.deleted_components),
        ):
            if paths:
                lines.append(f"**{label}:** {', '.join(paths)}")
    elif change_set.all_paths:
        # Nothing under the component prefixes: list everything rather than nothing
        lines.append(f"**Changed:** {', '.join(change_set.all_paths)}")

    lines.append("")
    lines.append("**Commits:**")
    lines.extend(commit.format() for commit in change_set.commit_log)
    return "\n".join(lines)
