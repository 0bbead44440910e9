"""Commit range discovery through the remote commit-listing API."""

import asyncio

from loguru import logger

from rnchangelog.github import GitHubClient
from rnchangelog.history import LocalHistory
from rnchangelog.types.state import ChangelogState


def _resolve_refs(state: ChangelogState) -> tuple[str, str]:
    """Turn the base/compare refs into full shas using the local clone."""
    config = state["settings"]
    history = LocalHistory(config.repo_path, config.main_branch)
    compare_sha = history.rev_parse(state["compare"])

    if state.get("since_fork"):
        base_sha = history.find_first_commit_after_fork(state["compare"])
        logger.info(f"{state['compare']} forked from {config.main_branch}; starting at {base_sha[:8]}")
    else:
        base_sha = history.rev_parse(state["base"])

    return base_sha, compare_sha


async def commit_range_node(state: ChangelogState) -> ChangelogState:
    """Fetch the commits between base and compare, newest first."""
    if "compare" not in state or ("base" not in state and not state.get("since_fork")):
        raise ValueError("compare and either base or since_fork are required in ChangelogState")

    logger.info("Executing Commit Range Node")
    base_sha, compare_sha = await asyncio.to_thread(_resolve_refs, state)

    client = GitHubClient(state["settings"])
    commits = await client.fetch_commits(base_sha, compare_sha)

    logger.info(f"Discovered {len(commits)} commits between {base_sha[:8]} and {compare_sha[:8]}")
    return {
        **state,
        "base_sha": base_sha,
        "compare_sha": compare_sha,
        "commits": commits,
        "commit_count": len(commits),
    }
