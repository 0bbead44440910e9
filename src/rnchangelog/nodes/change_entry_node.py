"""Change entry extraction from annotated commit messages."""

import re
from typing import List, Optional

from loguru import logger

from rnchangelog.types.base import ChangeEntry, CommitRef
from rnchangelog.types.state import ChangelogState

# [Platform] [Type] - Free text (#123)
CHANGELOG_LINE_PATTERN = re.compile(r"^\s*\[([^\[\]]+)\]\s*\[([^\[\]]+)\]\s*-\s*(.*?)\s*$")
PULL_REQUEST_SUFFIX_PATTERN = re.compile(r"\s*\(#\d+\)$")


def parse_change_entry(commit: CommitRef) -> Optional[ChangeEntry]:
    """Extract the changelog annotation from a commit message, if it has one.

    When several lines carry an annotation the last one wins, since summaries
    are conventionally written at the end of the message.
    """
    for line in reversed(commit.message.splitlines()):
        match = CHANGELOG_LINE_PATTERN.match(line)
        if not match:
            continue
        platform_tag, type_tag, text = match.groups()
        text = PULL_REQUEST_SUFFIX_PATTERN.sub("", text).strip()
        if not text:
            continue
        return ChangeEntry(
            platform_tag=platform_tag.strip(),
            type_tag=type_tag.strip(),
            text=text,
            sha=commit.sha,
            author_login=commit.author_login,
        )
    return None


def get_change_message(commit: CommitRef, org: str = "facebook", repo: str = "react-native") -> Optional[str]:
    """Format a commit as a single changelog line, or None if it has no annotation."""
    entry = parse_change_entry(commit)
    if entry is None:
        return None
    return entry.to_markdown(org=org, repo=repo)


def change_entry_node(state: ChangelogState) -> ChangelogState:
    """Extract one entry per resolved commit, preserving range order."""
    logger.info("Executing Change Entry Node")
    config = state["settings"]
    skip_types = set(config.skip_types)

    entries: List[ChangeEntry] = []
    for commit in state.get("resolved_commits", []):
        entry = parse_change_entry(commit)
        if entry is None:
            logger.debug(f"No changelog annotation in {commit.short_sha}")
            continue
        if entry.type_tag in skip_types:
            logger.debug(f"Skipping {commit.short_sha} tagged [{entry.type_tag}]")
            continue
        entries.append(entry)

    logger.info(f"Extracted {len(entries)} changelog entries")
    return {**state, "entries": entries}
