"""Errors raised while assembling a changelog."""


class ChangelogError(Exception):
    """Base class for all rnchangelog failures."""


class BoundaryNotFoundError(ChangelogError):
    """The base commit never showed up while paginating back from compare."""

    def __init__(self, base_sha: str, pages_fetched: int, reason: str):
        self.base_sha = base_sha
        self.pages_fetched = pages_fetched
        super().__init__(f"Base commit {base_sha} not found after {pages_fetched} page(s): {reason}")


class OriginalCommitNotFoundError(ChangelogError):
    """A ported commit has a revision marker but no main-line original exists locally."""

    def __init__(self, sha: str, marker: str):
        self.sha = sha
        self.marker = marker
        super().__init__(
            f"No commit on the main line carries '{marker}' (ported as {sha}); is the local checkout up to date?"
        )


class MalformedResponseError(ChangelogError):
    """The remote returned a payload that is not a list of commit objects."""


class UnexpectedRequestError(ChangelogError):
    """A request path did not match the commit-listing endpoint pattern."""


class ForkPointNotFoundError(ChangelogError):
    """No commit on the given ref diverges from the main line."""
