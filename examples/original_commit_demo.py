#!/usr/bin/env python3
"""
examples/original_commit_demo.py

Demonstrates the local-history half of rnchangelog against a react-native
checkout: finds where a release branch forked from master, then maps every
cherry-picked commit on the branch back to its original on master.
"""

import argparse
import asyncio
import os
import sys

from rnchangelog.errors import ChangelogError
from rnchangelog.history import LocalHistory
from rnchangelog.nodes.change_entry_node import get_change_message
from rnchangelog.nodes.original_commit_node import resolve_original_commit
from rnchangelog.types.base import CommitRef


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Show the fork point and picked commits of a release branch")
    parser.add_argument(
        "--repo-path",
        type=str,
        default=os.getcwd(),
        help="Path to a react-native checkout (default: current directory)",
    )
    parser.add_argument("--ref", type=str, default="0.61-stable", help="Release branch or tag to inspect")
    parser.add_argument("--main-branch", type=str, default="master", help="Name of the main line branch")
    return parser.parse_args()


async def run(args) -> None:
    history = LocalHistory(args.repo_path, args.main_branch)
    fork_sha = history.find_first_commit_after_fork(args.ref)
    print(f"{args.ref} forked from {args.main_branch} at {fork_sha[:7]}\n")

    for commit in history.repo.iter_commits(f"{fork_sha}^..{args.ref}", first_parent=True):
        ref = CommitRef(sha=commit.hexsha, message=commit.message, author_login=commit.author.name)
        original = await resolve_original_commit(history, ref)
        origin = f"picked from {original.sha[:7]}" if original.sha != ref.sha else "branch only"
        print(f"{ref.short_sha} ({origin})")
        line = get_change_message(original)
        if line:
            print(f"  {line}")


def main():
    """Run the original commit demo."""
    args = parse_args()
    try:
        asyncio.run(run(args))
    except ChangelogError as e:
        print(f"Error inspecting {args.ref}: {str(e)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
