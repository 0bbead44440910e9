"""Changelog Renderer Node for merging new entries into an existing changelog."""

from typing import List

from loguru import logger

from rnchangelog.types.base import ChangeEntry
from rnchangelog.types.state import ChangelogState


def _is_already_listed(entry: ChangeEntry, existing_changelog: str) -> bool:
    """Check whether the existing changelog already links to the entry's commit."""
    return f"[{entry.short_sha}]" in existing_changelog or f"/commit/{entry.short_sha}" in existing_changelog


def render_entries(entries: List[ChangeEntry], existing_changelog: str, org: str, repo: str) -> List[str]:
    """Format entries that are not yet in the changelog, keeping their order."""
    lines = []
    for entry in entries:
        if _is_already_listed(entry, existing_changelog):
            logger.warning(f"Skipping {entry.short_sha}, already present in the changelog")
            continue
        lines.append(entry.to_markdown(org=org, repo=repo))
    return lines


def merge_changelog(new_lines: List[str], existing_changelog: str) -> str:
    """Prepend new lines to the existing changelog content."""
    if not new_lines:
        return existing_changelog
    new_content = "\n".join(new_lines) + "\n"
    if not existing_changelog:
        return new_content
    return new_content + existing_changelog


def changelog_renderer_node(state: ChangelogState) -> ChangelogState:
    """Produce the final changelog document."""
    logger.info("Executing Changelog Renderer Node")
    config = state["settings"]
    existing_changelog = state.get("existing_changelog", "")

    new_lines = render_entries(state.get("entries", []), existing_changelog, config.org, config.repo)
    logger.info(f"Adding {len(new_lines)} new changelog lines")

    return {
        **state,
        "new_lines": new_lines,
        "changelog": merge_changelog(new_lines, existing_changelog),
    }
