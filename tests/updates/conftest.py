"""Temporary git repositories for update check tests.

Layout: a bare ``remote.git`` with branch ``main``, a ``local`` clone the
checker runs against, and an ``upstream`` clone used to push new commits.
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest


def git(repo_path: Path, *args: str) -> str:
    """Run git with a fixed identity and return stdout."""
    result = subprocess.run(
        [
            "git",
            "-c",
            "user.name=Test User",
            "-c",
            "user.email=test@example.com",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=repo_path,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def write_file(repo_path: Path, relative: str, content: str) -> None:
    path = repo_path / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def commit_all(repo_path: Path, message: str) -> None:
    git(repo_path, "add", "-A")
    git(repo_path, "commit", "--quiet", "-m", message)


@dataclass
class GitRepos:
    """Remote plus two clones sharing one initial commit."""

    remote: Path
    local: Path
    upstream: Path

    def git(self, repo_path: Path, *args: str) -> str:
        return git(repo_path, *args)

    def upstream_commit(
        self,
        message: str,
        files: dict[str, str] | None = None,
        deletes: list[str] | None = None,
    ) -> None:
        """Write and delete files in the upstream clone, then commit."""
        for relative, content in (files or {}).items():
            write_file(self.upstream, relative, content)
        for relative in deletes or []:
            (self.upstream / relative).unlink()
        commit_all(self.upstream, message)

    def push_upstream(self) -> None:
        git(self.upstream, "push", "--quiet", "origin", "main")

    def local_commit(self, message: str, files: dict[str, str]) -> None:
        for relative, content in files.items():
            write_file(self.local, relative, content)
        commit_all(self.local, message)


@pytest.fixture
def git_repos(tmp_path) -> GitRepos:
    """Create remote, local and upstream repositories on branch main."""
    remote_path = tmp_path / "remote.git"
    remote_path.mkdir()
    git(remote_path, "init", "--bare", "--quiet")
    git(remote_path, "symbolic-ref", "HEAD", "refs/heads/main")

    seed_path = tmp_path / "seed"
    seed_path.mkdir()
    git(seed_path, "init", "--quiet")
    git(seed_path, "symbolic-ref", "HEAD", "refs/heads/main")
    write_file(seed_path, "components/Bar.json", '{"name": "Bar"}\n')
    write_file(seed_path, "specs/components/Old.json", '{"name": "Old"}\n')
    write_file(seed_path, "README.md", "# Components\n")
    commit_all(seed_path, "Initial catalog")
    git(seed_path, "remote", "add", "origin", str(remote_path))
    git(seed_path, "push", "--quiet", "origin", "main")

    local_path = tmp_path / "local"
    upstream_path = tmp_path / "upstream"
    git(tmp_path, "clone", "--quiet", str(remote_path), str(local_path))
    git(tmp_path, "clone", "--quiet", str(remote_path), str(upstream_path))

    return GitRepos(remote=remote_path, local=local_path, upstream=upstream_path)
