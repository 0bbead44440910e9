"""State management types for the rnchangelog workflow."""

from typing import List, Optional, TypedDict

from rnchangelog.config import ChangelogConfig
from rnchangelog.types.base import ChangeEntry, CommitRef


class ChangelogState(TypedDict, total=False):
    """
    Shared state passed between workflow nodes.

    Using TypedDict for LangGraph compatibility. total=False means all fields
    are optional; each node fills in the fields it owns.
    """

    # Inputs
    settings: ChangelogConfig
    base: str  # Base tag, branch or sha (oldest end of the range)
    compare: str  # Compare tag, branch or sha (newest end of the range)
    since_fork: bool  # Use the compare ref's fork point as the base
    existing_changelog: str

    # Commit Range Node Output
    base_sha: str
    compare_sha: str
    commits: List[CommitRef]
    commit_count: int

    # Original Commit Node Output
    resolved_commits: List[CommitRef]

    # Change Entry Node Output
    entries: List[ChangeEntry]

    # Changelog Renderer Node Output
    new_lines: List[str]
    changelog: Optional[str]
