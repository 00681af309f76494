"""Tests for the PyGithub-backed reader/writer."""

import types
from unittest.mock import MagicMock

import pytest
from github import GithubException, UnknownObjectException

from clabot_core.gh.client import GitHubClient


def _client():
    gh = MagicMock()
    return GitHubClient(gh=gh), gh


class TestGetRepos:
    def test_single_repo(self):
        client, gh = _client()
        gh.get_repo.return_value.name = "widgets"
        assert client.get_repos("acme", "widgets") == ["widgets"]
        gh.get_repo.assert_called_once_with("acme/widgets")

    def test_all_repos_in_org(self):
        client, gh = _client()
        gh.get_organization.return_value.get_repos.return_value = [
            types.SimpleNamespace(name="a", full_name="acme/a"),
            types.SimpleNamespace(name="b", full_name="acme/b"),
        ]
        assert client.get_repos("acme") == ["a", "b"]

    def test_falls_back_to_user_account(self):
        client, gh = _client()
        gh.get_organization.side_effect = UnknownObjectException(404, {"message": "Not Found"}, None)
        gh.get_user.return_value.get_repos.return_value = [
            types.SimpleNamespace(name="dotfiles", full_name="jd/dotfiles"),
        ]
        assert client.get_repos("jd") == ["dotfiles"]
        gh.get_user.assert_called_once_with("jd")

    def test_listed_repos_are_reused(self):
        client, gh = _client()
        listed = MagicMock(full_name="acme/a")
        listed.name = "a"
        gh.get_organization.return_value.get_repos.return_value = [listed]
        client.get_repos("acme")
        client.get_commits("acme", "a", 1)
        gh.get_repo.assert_not_called()
        listed.get_pull.assert_called_once_with(1)


class TestReads:
    def test_open_pulls(self):
        client, gh = _client()
        assert list(client.get_pulls("acme", "widgets")) == []
        gh.get_repo.return_value.get_pulls.assert_called_once_with(state="open")

    def test_single_pull(self):
        client, gh = _client()
        repo = gh.get_repo.return_value
        repo.get_pull.side_effect = lambda n: types.SimpleNamespace(number=n)
        assert client.get_pull("acme", "widgets", 7).number == 7
        repo.get_pulls.assert_not_called()

    def test_pull_handle_fetched_once(self):
        client, gh = _client()
        repo = gh.get_repo.return_value
        client.get_pull("acme", "widgets", 7)
        client.get_commits("acme", "widgets", 7)
        client.create_review("acme", "widgets", 7, "body", "APPROVE")
        repo.get_pull.assert_called_once_with(7)
        repo.get_pull.return_value.get_commits.assert_called_once_with()

    def test_listed_pulls_are_reused(self):
        client, gh = _client()
        repo = gh.get_repo.return_value
        listed = MagicMock(number=3)
        repo.get_pulls.return_value = [listed]
        assert list(client.get_pulls("acme", "widgets")) == [listed]
        client.get_commits("acme", "widgets", 3)
        repo.get_pull.assert_not_called()
        listed.get_commits.assert_called_once_with()

    def test_failed_pull_lookup_is_not_cached(self):
        client, gh = _client()
        repo = gh.get_repo.return_value
        repo.get_pull.side_effect = [UnknownObjectException(404, {}, None), types.SimpleNamespace(number=9)]
        with pytest.raises(UnknownObjectException):
            client.get_pull("acme", "widgets", 9)
        assert client.get_pull("acme", "widgets", 9).number == 9

    def test_repo_handle_looked_up_once(self):
        client, gh = _client()
        list(client.get_pulls("acme", "widgets"))
        client.get_commits("acme", "widgets", 1)
        gh.get_repo.assert_called_once_with("acme/widgets")

    def test_has_label(self):
        client, gh = _client()
        assert client.has_label("acme", "widgets", "cla: yes") is True
        gh.get_repo.return_value.get_label.assert_called_once_with("cla: yes")

    def test_has_label_missing(self):
        client, gh = _client()
        gh.get_repo.return_value.get_label.side_effect = UnknownObjectException(404, {}, None)
        assert client.has_label("acme", "widgets", "cla: yes") is False

    def test_issue_labels(self):
        client, gh = _client()
        labels = [types.SimpleNamespace(name="cla: yes"), types.SimpleNamespace(name="bug")]
        gh.get_repo.return_value.get_issue.return_value.get_labels.return_value = labels
        assert client.get_issue_labels("acme", "widgets", 5) == ["cla: yes", "bug"]

    def test_read_errors_propagate(self):
        client, gh = _client()
        gh.get_repo.return_value.get_pull.side_effect = GithubException(500, {}, None)
        with pytest.raises(GithubException):
            client.get_commits("acme", "widgets", 5)


class TestWrites:
    def test_add_and_remove_label(self):
        client, gh = _client()
        issue = gh.get_repo.return_value.get_issue.return_value
        client.add_label("acme", "widgets", 5, "cla: no")
        client.remove_label("acme", "widgets", 5, "cla: yes")
        issue.add_to_labels.assert_called_once_with("cla: no")
        issue.remove_from_labels.assert_called_once_with("cla: yes")

    def test_comment(self):
        client, gh = _client()
        client.create_comment("acme", "widgets", 5, "hello")
        gh.get_repo.return_value.get_issue.return_value.create_comment.assert_called_once_with("hello")

    def test_review(self):
        client, gh = _client()
        client.create_review("acme", "widgets", 5, "body", "REQUEST_CHANGES")
        gh.get_repo.return_value.get_pull.return_value.create_review.assert_called_once_with(
            body="body", event="REQUEST_CHANGES"
        )
