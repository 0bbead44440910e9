"""Shared fixtures: throwaway repositories with a main line and a release branch."""

import hashlib
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import httpx
import pytest
from git import Repo

from rnchangelog.errors import UnexpectedRequestError

PICKED_MESSAGE = "[iOS] [Fixed] - Some great fixes! (#42)\n\nDifferential Revision: D17285473"


def create_commit(repo: Repo, message: str, parents: List) -> object:
    """Create a commit on explicit parents without moving HEAD."""
    return repo.index.commit(message, parent_commits=parents, head=False)


def fake_sha(label: str) -> str:
    """A stable, unique 40-character hex sha for synthetic API payloads."""
    return hashlib.sha1(label.encode("utf-8")).hexdigest()


def commit_payload(sha: str, message: str = "Some change", login: Optional[str] = "alloy") -> dict:
    """One element of the GitHub commit-listing response."""
    return {
        "sha": sha,
        "commit": {"message": message},
        "author": {"login": login} if login else None,
    }


def commits_transport(
    pages: Dict[int, List[dict]],
    compare: str,
    requested: List[str],
    always_next: bool = False,
    repo_name: str = "facebook/react-native",
) -> httpx.MockTransport:
    """Serve the given pages for compare; anything else is an unexpected request."""
    last_page = max(pages) if pages else 0

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode("ascii")
        requested.append(path)
        for number, payload in pages.items():
            if path == f"/repos/{repo_name}/commits?sha={compare}&page={number}":
                headers = {}
                if always_next or number < last_page:
                    next_url = f"https://api.github.com/repositories/1/commits?sha={compare}&page={number + 1}"
                    headers["link"] = f'<{next_url}>; rel="next"'
                return httpx.Response(200, json=payload, headers=headers)
        raise UnexpectedRequestError(f"Unexpected request: {path}")

    return httpx.MockTransport(handler)


@pytest.fixture
def forked_repo(tmp_path):
    """
    A repository whose release branch forked from master.

    master:       m1 - m2 - m3 - m4
                        \\
    0.61-stable:         b1 - b2 - b3 - b4 (merge of m4)

    b2 is a cherry-pick of m2 (same Differential Revision), tagged v0.61.0.
    m3 carries a revision id that has m2's id as a prefix.
    b3 carries a marker with no original on master.
    """
    repo_path = tmp_path / "test_repo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    readme = Path(repo_path) / "README.md"
    readme.write_text("React Native\n")
    repo.index.add(["README.md"])

    m1 = create_commit(repo, "Initial commit", [])
    m2 = create_commit(repo, PICKED_MESSAGE, [m1])
    m3 = create_commit(repo, "Add feature B\n\nDifferential Revision: D172854730", [m2])
    m4 = create_commit(repo, "[General] [Added] - Feature C\n\nDifferential Revision: D100", [m3])
    repo.create_head("master", m4, force=True)

    b1 = create_commit(repo, "Bump version numbers to 0.61.0-rc.0", [m2])
    b2 = create_commit(repo, PICKED_MESSAGE, [b1])
    repo.create_tag("v0.61.0", ref=b2)
    b3 = create_commit(repo, "[Android] [Fixed] - Local only fix\n\nDifferential Revision: D1728547", [b2])
    b4 = create_commit(repo, "Merge master into 0.61-stable", [b3, m4])
    repo.create_head("0.61-stable", b4)

    return SimpleNamespace(
        path=str(repo_path),
        repo=repo,
        m1=m1,
        m2=m2,
        m3=m3,
        m4=m4,
        b1=b1,
        b2=b2,
        b3=b3,
        b4=b4,
    )
