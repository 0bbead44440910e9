"""rnchangelog workflow integration using LangGraph for orchestration."""

import argparse
import asyncio
import os
import sys
from typing import Optional

import httpx
from langgraph.graph import END, StateGraph
from loguru import logger

from rnchangelog.config import ChangelogConfig, load_config
from rnchangelog.errors import ChangelogError
from rnchangelog.nodes.change_entry_node import change_entry_node
from rnchangelog.nodes.changelog_renderer_node import changelog_renderer_node
from rnchangelog.nodes.commit_range_node import commit_range_node
from rnchangelog.nodes.original_commit_node import original_commit_node
from rnchangelog.types.state import ChangelogState


def create_workflow():
    """Create the changelog workflow graph."""
    workflow = StateGraph(ChangelogState)

    # Add nodes
    workflow.add_node("commit_range_node", commit_range_node)
    workflow.add_node("original_commit_node", original_commit_node)
    workflow.add_node("change_entry_node", change_entry_node)
    workflow.add_node("changelog_renderer_node", changelog_renderer_node)

    workflow.set_entry_point("commit_range_node")

    # Define edges
    workflow.add_edge("commit_range_node", "original_commit_node")
    workflow.add_edge("original_commit_node", "change_entry_node")
    workflow.add_edge("change_entry_node", "changelog_renderer_node")
    workflow.add_edge("changelog_renderer_node", END)

    return workflow.compile()


async def run_workflow_async(initial_state: ChangelogState) -> ChangelogState:
    """Run the changelog workflow and return the final state."""
    app = create_workflow()
    return await app.ainvoke(initial_state)


async def generate_changelog(
    config: ChangelogConfig,
    compare: str,
    base: Optional[str] = None,
    existing_changelog: str = "",
    since_fork: bool = False,
) -> str:
    """Build the changelog for base..compare and merge it into existing_changelog."""
    initial_state: ChangelogState = {
        "settings": config,
        "compare": compare,
        "since_fork": since_fork,
        "existing_changelog": existing_changelog,
    }
    if base is not None:
        initial_state["base"] = base

    final_state = await run_workflow_async(initial_state)
    return final_state["changelog"]


def _read_changelog(path: Optional[str]) -> str:
    if not path or not os.path.exists(path):
        return ""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main():
    parser = argparse.ArgumentParser(description="Generate changelog entries for a range of commits")
    parser.add_argument("--base", type=str, help="Oldest tag, branch or sha of the range (inclusive)")
    parser.add_argument("--compare", type=str, required=True, help="Newest tag, branch or sha of the range")
    parser.add_argument("--repo-path", type=str, help="Path to a local clone of the repository", default=".")
    parser.add_argument("--changelog", type=str, help="Changelog file to prepend new entries to")
    parser.add_argument(
        "--since-fork",
        action="store_true",
        help="Start at the first commit after --compare forked from the main branch",
    )
    parser.add_argument("--main-branch", type=str, help="Name of the main line branch (default: master)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args()

    if not args.base and not args.since_fork:
        parser.error("either --base or --since-fork is required")

    if not args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    config = load_config(args.repo_path, main_branch=args.main_branch)
    if not config.token:
        logger.warning("GITHUB_TOKEN is not set; requests will be subject to anonymous rate limits")

    logger.info(f"Generating changelog for {args.base or 'fork point'}..{args.compare} in {config.repo_path}")
    try:
        changelog = asyncio.run(
            generate_changelog(
                config,
                compare=args.compare,
                base=args.base,
                existing_changelog=_read_changelog(args.changelog),
                since_fork=args.since_fork,
            )
        )
    except (ChangelogError, httpx.HTTPError) as e:
        logger.error(f"Failed to generate changelog: {e}")
        sys.exit(1)

    if args.changelog:
        with open(args.changelog, "w", encoding="utf-8") as f:
            f.write(changelog)
        logger.info(f"Changelog saved to: {args.changelog}")
    else:
        sys.stdout.write(changelog)


if __name__ == "__main__":
    main()
