"""Runtime configuration for changelog generation."""

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import httpx
from dotenv import find_dotenv, load_dotenv

DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class ChangelogConfig:
    """Settings shared by the paginator, the resolver and the renderer."""

    repo_path: str = "."
    token: str = field(default="", repr=False)
    org: str = "facebook"
    repo: str = "react-native"
    api_url: str = DEFAULT_API_URL
    main_branch: str = "master"
    max_pages: int = 100
    timeout: float = 30.0
    skip_types: Tuple[str, ...] = ("Internal",)
    # Tests swap in httpx.MockTransport here
    transport: Optional[httpx.AsyncBaseTransport] = field(default=None, repr=False, compare=False)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_config(repo_path: str = ".", **overrides) -> ChangelogConfig:
    """Build a config from the environment (and a .env file), then apply overrides."""
    load_dotenv(find_dotenv(usecwd=True))
    config = ChangelogConfig(
        repo_path=os.path.abspath(repo_path),
        token=os.getenv("GITHUB_TOKEN", ""),
        org=os.getenv("RN_CHANGELOG_ORG", "facebook"),
        repo=os.getenv("RN_CHANGELOG_REPO", "react-native"),
        main_branch=os.getenv("RN_CHANGELOG_MAIN_BRANCH", "master"),
        max_pages=_env_int("RN_CHANGELOG_MAX_PAGES", 100),
    )
    overrides = {key: value for key, value in overrides.items() if value is not None}
    return replace(config, **overrides)
