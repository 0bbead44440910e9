"""
Paginated access to the GitHub commit-listing endpoint.
"""

import re
from dataclasses import replace
from typing import Any, List, Optional, Set

import httpx
from loguru import logger

from rnchangelog.config import ChangelogConfig
from rnchangelog.errors import BoundaryNotFoundError, MalformedResponseError, UnexpectedRequestError
from rnchangelog.types.base import CommitRef, Page

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")
SHA_PATTERN = re.compile(r"^[0-9a-f]{7,40}$")
FULL_SHA_PATTERN = re.compile(r"^[0-9a-f]{40}$")
GHOST_LOGIN = "ghost"  # GitHub's placeholder for commits without a linked account


def _parse_commit(item: Any, index: int) -> CommitRef:
    """Build a CommitRef from one element of the commit-listing payload."""
    if not isinstance(item, dict):
        raise MalformedResponseError(f"Commit #{index} is {type(item).__name__}, expected an object")

    sha = item.get("sha")
    details = item.get("commit")
    if not isinstance(sha, str) or not isinstance(details, dict) or not isinstance(details.get("message"), str):
        raise MalformedResponseError(f"Commit #{index} is missing 'sha' or 'commit.message'")

    author = item.get("author")
    login = author.get("login") if isinstance(author, dict) else None
    return CommitRef(sha=sha, message=details["message"], author_login=login or GHOST_LOGIN)


def parse_commits(response: httpx.Response) -> List[CommitRef]:
    """Decode a full response body into CommitRefs, validating its shape."""
    try:
        payload = response.json()
    except ValueError as e:
        raise MalformedResponseError(f"Response from {response.request.url} is not valid JSON") from e

    if not isinstance(payload, list):
        raise MalformedResponseError(f"Expected a list of commits, got {type(payload).__name__}")

    return [_parse_commit(item, index) for index, item in enumerate(payload)]


class GitHubClient:
    """Thin httpx wrapper around GET /repos/<org>/<repo>/commits."""

    def __init__(self, config: ChangelogConfig):
        self.config = config

    def _headers(self) -> dict:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "rnchangelog",
        }
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def _open(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.api_url,
            headers=self._headers(),
            timeout=self.config.timeout,
            transport=self.config.transport,
        )

    def commits_path(self, sha: str) -> str:
        """Build the commit-listing path, refusing anything that would not match the endpoint."""
        org, repo = self.config.org, self.config.repo
        if not NAME_PATTERN.match(org) or not NAME_PATTERN.match(repo):
            raise UnexpectedRequestError(f"Refusing to request commits for repository '{org}/{repo}'")
        if not SHA_PATTERN.match(sha):
            raise UnexpectedRequestError(f"Refusing to request commits starting at '{sha}', expected a hex sha")
        return f"/repos/{org}/{repo}/commits"

    async def fetch_page(self, client: httpx.AsyncClient, sha: str, page: int) -> Page:
        """Fetch one page of commits reachable from sha."""
        path = self.commits_path(sha)
        logger.debug(f"GET {path}?sha={sha}&page={page}")
        response = await client.get(path, params={"sha": sha, "page": page})
        response.raise_for_status()
        commits = parse_commits(response)
        return Page(number=page, commits=commits, has_next="next" in response.links)

    async def fetch_commits(self, base_sha: str, compare_sha: str) -> List[CommitRef]:
        """
        Page back from compare_sha until base_sha shows up.

        Returns the commits newest first, starting at compare_sha and ending at
        base_sha, both inclusive. Pages are requested one at a time because
        each page decides whether the next one is needed.
        """
        # Stopping compares full shas, so an abbreviated base would never match
        if not FULL_SHA_PATTERN.match(base_sha):
            raise UnexpectedRequestError(f"Base must be a full 40-character sha, got {base_sha!r}")

        commits: List[CommitRef] = []
        seen: Set[str] = set()
        max_pages = self.config.max_pages

        async with self._open() as client:
            for page_number in range(1, max_pages + 1):
                page = await self.fetch_page(client, compare_sha, page_number)
                logger.debug(f"Page {page_number}: {len(page.commits)} commits, next page: {page.next_page}")

                if page_number == 1 and page.commits and not page.commits[0].sha.startswith(compare_sha):
                    raise MalformedResponseError(
                        f"First listed commit {page.commits[0].sha} does not match compare {compare_sha}"
                    )

                for commit in page.commits:
                    if commit.sha in seen:
                        logger.debug(f"Skipping {commit.short_sha}, already listed on an earlier page")
                        continue
                    seen.add(commit.sha)
                    commits.append(commit)
                    if commit.sha == base_sha:
                        logger.info(f"Found base {base_sha[:8]} on page {page_number}; {len(commits)} commits in range")
                        return commits

                if not page.has_next or not page.commits:
                    raise BoundaryNotFoundError(base_sha, page_number, "the remote has no further pages")

        raise BoundaryNotFoundError(base_sha, max_pages, f"gave up after the {max_pages} page limit")


async def fetch_commits(
    auth_token: str, base_sha: str, compare_sha: str, config: Optional[ChangelogConfig] = None
) -> List[CommitRef]:
    """Fetch the commit range compare_sha..base_sha (both inclusive), newest first."""
    config = replace(config or ChangelogConfig(), token=auth_token)
    return await GitHubClient(config).fetch_commits(base_sha, compare_sha)
