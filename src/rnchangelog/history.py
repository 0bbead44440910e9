"""
Local repository queries used to cross-check commits against the main line.
"""

from typing import List

from git import Repo
from git.exc import GitCommandError
from loguru import logger

from rnchangelog.errors import ForkPointNotFoundError


class LocalHistory:
    """Read-only view over a local clone, anchored on its main branch."""

    def __init__(self, repo_path: str, main_branch: str = "master"):
        """Initialize with the path to a checkout and the name of its main line."""
        self.repo = Repo(repo_path)
        self.main_branch = main_branch

    def has_commit(self, sha: str) -> bool:
        """Check whether the object exists locally and is a commit."""
        try:
            self.repo.git.cat_file("-e", f"{sha}^{{commit}}")
        except GitCommandError:
            return False
        return True

    def is_ancestor_of_main(self, sha: str) -> bool:
        """True if the commit is reachable from the main branch."""
        if not self.has_commit(sha):
            logger.debug(f"Commit {sha[:8]} does not exist locally")
            return False
        return self.repo.is_ancestor(sha, self.main_branch)

    def rev_parse(self, ref: str) -> str:
        """Resolve a tag, branch or abbreviated sha to a full commit sha."""
        return self.repo.commit(ref).hexsha

    def commit_message(self, sha: str) -> str:
        return self.repo.commit(sha).message

    def find_commits_with_marker(self, marker: str) -> List[str]:
        """Return shas of commits in any local ref whose message mentions marker, newest first."""
        output = self.repo.git.log("--all", "--format=%H", "--fixed-strings", f"--grep={marker}")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def find_first_commit_after_fork(self, ref: str) -> str:
        """
        Find the commit at which ref diverged from the main line.

        Walks the first-parent history of ref from its tip and returns the
        first commit whose first parent is on the main line.
        """
        tip = self.rev_parse(ref)
        if self.is_ancestor_of_main(tip):
            raise ForkPointNotFoundError(f"{ref} is already part of {self.main_branch}")

        walked = 0
        for commit in self.repo.iter_commits(tip, first_parent=True):
            walked += 1
            if not commit.parents:
                break
            parent = commit.parents[0]
            if self.is_ancestor_of_main(parent.hexsha):
                logger.debug(f"{ref} forked from {self.main_branch} at {parent.hexsha[:8]} after {walked} commit(s)")
                return commit.hexsha

        raise ForkPointNotFoundError(f"{ref} never joins {self.main_branch} along its first-parent history")


def find_first_commit_after_fork(git_dir: str, branch_or_tag: str, main_branch: str = "master") -> str:
    """Return the sha of the first commit on branch_or_tag whose first parent is on the main line."""
    return LocalHistory(git_dir, main_branch).find_first_commit_after_fork(branch_or_tag)
