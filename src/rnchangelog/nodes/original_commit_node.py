"""
Resolution of cherry-picked commits back to their original on the main line.
"""

import asyncio
import re
from dataclasses import replace
from typing import List, Optional

from loguru import logger

from rnchangelog.errors import OriginalCommitNotFoundError
from rnchangelog.history import LocalHistory
from rnchangelog.types.base import CommitRef
from rnchangelog.types.state import ChangelogState

DIFFERENTIAL_REVISION_PATTERN = re.compile(r"Differential Revision: D(\d+)\b")


def extract_revision_id(message: str) -> Optional[str]:
    """Return the numeric Differential Revision id from a commit message."""
    match = DIFFERENTIAL_REVISION_PATTERN.search(message)
    return match.group(1) if match else None


def _find_original_sha(history: LocalHistory, commit: CommitRef, revision_id: str) -> Optional[str]:
    marker = f"Differential Revision: D{revision_id}"
    # A commit that already lives on the main line is its own original
    for candidate in history.find_commits_with_marker(marker):
        # grep matches D123 inside D1234, so compare the full ids
        if extract_revision_id(history.commit_message(candidate)) != revision_id:
            continue
        if history.is_ancestor_of_main(candidate):
            return candidate
    return None


async def resolve_original_commit(history: LocalHistory, commit: CommitRef) -> CommitRef:
    """Swap a ported commit's sha for the main-line original carrying the same revision."""
    revision_id = extract_revision_id(commit.message)
    if revision_id is None:
        return commit

    original_sha = await asyncio.to_thread(_find_original_sha, history, commit, revision_id)
    if original_sha is None:
        raise OriginalCommitNotFoundError(commit.sha, f"Differential Revision: D{revision_id}")

    if original_sha != commit.sha:
        logger.debug(f"{commit.short_sha} was picked from {original_sha[:7]} (D{revision_id})")
    return replace(commit, sha=original_sha)


async def get_original_commit(repo_path: str, commit: CommitRef, main_branch: str = "master") -> CommitRef:
    """Return commit, with its sha pointing at the original when it was cherry-picked."""
    history = await asyncio.to_thread(LocalHistory, repo_path, main_branch)
    return await resolve_original_commit(history, commit)


async def original_commit_node(state: ChangelogState) -> ChangelogState:
    """Resolve every commit in the range to its original identity."""
    logger.info("Executing Original Commit Node")
    config = state["settings"]
    history = await asyncio.to_thread(LocalHistory, config.repo_path, config.main_branch)

    resolved: List[CommitRef] = []
    for commit in state.get("commits", []):
        resolved.append(await resolve_original_commit(history, commit))

    picked = sum(1 for before, after in zip(state.get("commits", []), resolved) if before.sha != after.sha)
    logger.info(f"Resolved {picked} cherry-picked commits to their originals")
    return {**state, "resolved_commits": resolved}
