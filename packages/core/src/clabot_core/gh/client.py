"""PyGithub-backed implementation of the repository reader and writer."""

from __future__ import annotations

import logging

from github import Github, GithubException, UnknownObjectException

from clabot_core.gh.base import BaseRepoReader, BaseRepoWriter

logger = logging.getLogger(__name__)

USER_AGENT = "clabot"


class GitHubClient(BaseRepoReader, BaseRepoWriter):
    """Talks to the GitHub REST API through PyGithub.

    Repository and pull request handles are memoised per client so a run
    costs one lookup for each; commits and labels are fetched fresh.
    """

    def __init__(self, token: str | None = None, gh: Github | None = None):
        self._gh = gh if gh is not None else Github(token, user_agent=USER_AGENT)
        self._repos: dict[str, object] = {}
        self._pulls: dict[tuple[str, int], object] = {}

    def _repo(self, org: str, repo: str):
        full_name = f"{org}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self._gh.get_repo(full_name)
        return self._repos[full_name]

    def _pull(self, org: str, repo: str, number: int):
        key = (f"{org}/{repo}", number)
        if key not in self._pulls:
            self._pulls[key] = self._repo(org, repo).get_pull(number)
        return self._pulls[key]

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    def get_repos(self, org: str, repo: str | None = None) -> list[str]:
        if repo:
            return [self._repo(org, repo).name]
        # ``org`` may name a user account rather than an organization.
        try:
            owner = self._gh.get_organization(org)
        except UnknownObjectException:
            owner = self._gh.get_user(org)
        names = []
        for r in owner.get_repos():
            self._repos.setdefault(r.full_name, r)
            names.append(r.name)
        return names

    def get_pulls(self, org: str, repo: str):
        for pull in self._repo(org, repo).get_pulls(state="open"):
            self._pulls.setdefault((f"{org}/{repo}", pull.number), pull)
            yield pull

    def get_pull(self, org: str, repo: str, number: int):
        return self._pull(org, repo, number)

    def get_commits(self, org: str, repo: str, number: int):
        return self._pull(org, repo, number).get_commits()

    def has_label(self, org: str, repo: str, name: str) -> bool:
        try:
            return self._repo(org, repo).get_label(name) is not None
        except GithubException as e:
            logger.debug("Label [%s] not found on %s/%s: %s", name, org, repo, e)
            return False

    def get_issue_labels(self, org: str, repo: str, number: int) -> list[str]:
        return [label.name for label in self._repo(org, repo).get_issue(number).get_labels()]

    # ------------------------------------------------------------------ #
    # Writes                                                               #
    # ------------------------------------------------------------------ #

    def add_label(self, org: str, repo: str, number: int, label: str) -> None:
        self._repo(org, repo).get_issue(number).add_to_labels(label)

    def remove_label(self, org: str, repo: str, number: int, label: str) -> None:
        self._repo(org, repo).get_issue(number).remove_from_labels(label)

    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        self._repo(org, repo).get_issue(number).create_comment(body)

    def create_review(self, org: str, repo: str, number: int, body: str, event: str) -> None:
        self._pull(org, repo, number).create_review(body=body, event=event)
