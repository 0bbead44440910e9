"""Base types used across the rnchangelog system."""

from dataclasses import dataclass, field
from typing import List, Optional

COMMIT_URL_TEMPLATE = "https://github.com/{org}/{repo}/commit/{sha}"
SHORT_SHA_LENGTH = 7


@dataclass(frozen=True)
class CommitRef:
    """A single commit as listed by the remote commit API."""

    sha: str
    message: str
    author_login: str

    @property
    def short_sha(self) -> str:
        return self.sha[:SHORT_SHA_LENGTH]


@dataclass(frozen=True)
class Page:
    """One page of commits returned by a single remote fetch."""

    number: int
    commits: List[CommitRef] = field(default_factory=list)
    has_next: bool = False

    @property
    def next_page(self) -> Optional[int]:
        return self.number + 1 if self.has_next else None


@dataclass(frozen=True)
class ChangeEntry:
    """A changelog entry extracted from a commit message annotation."""

    platform_tag: str
    type_tag: str
    text: str
    sha: str
    author_login: str

    @property
    def short_sha(self) -> str:
        if len(self.sha) < SHORT_SHA_LENGTH:
            raise ValueError(f"Commit sha '{self.sha}' is shorter than {SHORT_SHA_LENGTH} characters")
        return self.sha[:SHORT_SHA_LENGTH]

    def to_markdown(self, org: str = "facebook", repo: str = "react-native") -> str:
        """Render the entry as a single changelog line."""
        short_sha = self.short_sha
        commit_url = COMMIT_URL_TEMPLATE.format(org=org, repo=repo, sha=short_sha)
        login = self.author_login
        return f"- {self.text} ([{short_sha}]({commit_url}) by [@{login}](https://github.com/{login}))"
