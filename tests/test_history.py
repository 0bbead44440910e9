"""Tests for local history queries."""

import pytest

from conftest import create_commit
from rnchangelog.errors import ForkPointNotFoundError
from rnchangelog.history import LocalHistory, find_first_commit_after_fork


def test_is_ancestor_of_main(forked_repo):
    history = LocalHistory(forked_repo.path)

    assert history.is_ancestor_of_main(forked_repo.m1.hexsha)
    assert history.is_ancestor_of_main(forked_repo.m4.hexsha)
    assert not history.is_ancestor_of_main(forked_repo.b1.hexsha)
    assert not history.is_ancestor_of_main(forked_repo.b2.hexsha)


def test_unknown_commit_is_not_on_main(forked_repo):
    history = LocalHistory(forked_repo.path)

    assert not history.has_commit("0" * 40)
    assert not history.is_ancestor_of_main("0" * 40)


def test_custom_main_branch(forked_repo):
    forked_repo.repo.create_head("main", forked_repo.m4)
    history = LocalHistory(forked_repo.path, main_branch="main")

    assert history.is_ancestor_of_main(forked_repo.m3.hexsha)
    assert not history.is_ancestor_of_main(forked_repo.b3.hexsha)


def test_rev_parse_resolves_tags_and_branches(forked_repo):
    history = LocalHistory(forked_repo.path)

    assert history.rev_parse("v0.61.0") == forked_repo.b2.hexsha
    assert history.rev_parse("0.61-stable") == forked_repo.b4.hexsha
    assert history.rev_parse(forked_repo.m2.hexsha[:10]) == forked_repo.m2.hexsha


def test_find_commits_with_marker_returns_all_mentions(forked_repo):
    history = LocalHistory(forked_repo.path)

    shas = set(history.find_commits_with_marker("Differential Revision: D17285473"))

    # Substring matches are expected here; exact matching is left to the caller
    assert shas == {forked_repo.m2.hexsha, forked_repo.b2.hexsha, forked_repo.m3.hexsha}


def test_find_first_commit_after_fork_from_branch(forked_repo):
    """The merge of master into the branch must not be mistaken for the fork point."""
    sha = find_first_commit_after_fork(forked_repo.path, "0.61-stable")
    assert sha == forked_repo.b1.hexsha


def test_find_first_commit_after_fork_from_tag(forked_repo):
    sha = find_first_commit_after_fork(forked_repo.path, "v0.61.0")
    assert sha == forked_repo.b1.hexsha


def test_tag_on_fork_commit_returns_itself(forked_repo):
    forked_repo.repo.create_tag("v0.61.0-rc.0", ref=forked_repo.b1)

    assert find_first_commit_after_fork(forked_repo.path, "v0.61.0-rc.0") == forked_repo.b1.hexsha


def test_ref_on_main_has_no_fork_point(forked_repo):
    with pytest.raises(ForkPointNotFoundError):
        find_first_commit_after_fork(forked_repo.path, "master")


def test_unrelated_history_has_no_fork_point(forked_repo):
    repo = forked_repo.repo
    orphan_root = create_commit(repo, "Orphan root", [])
    orphan_tip = create_commit(repo, "Orphan work", [orphan_root])
    repo.create_head("orphan", orphan_tip)

    with pytest.raises(ForkPointNotFoundError):
        find_first_commit_after_fork(forked_repo.path, "orphan")
