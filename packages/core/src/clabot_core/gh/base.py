"""Abstract GitHub collaborators.

The processor depends on these interfaces rather than on PyGithub so the
decision logic can run against any hosting backend, or a fake in tests.
Implementations own pagination, rate limiting and retries. Read methods
raise ``github.GithubException`` (or a subclass) on failure; the
processor decides what to skip.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable


class BaseRepoReader(ABC):
    """Read-only view of organizations, repositories and pull requests."""

    @abstractmethod
    def get_repos(self, org: str, repo: str | None = None) -> list[str]:
        """Return repository names: just ``repo`` if given, else every repo in ``org``."""

    @abstractmethod
    def get_pulls(self, org: str, repo: str) -> Iterable:
        """Return every open pull request in the repository.

        Each item exposes at least ``number`` and ``title``.
        """

    @abstractmethod
    def get_pull(self, org: str, repo: str, number: int):
        """Return a single pull request by number, open or closed."""

    @abstractmethod
    def get_commits(self, org: str, repo: str, number: int) -> Iterable:
        """Return the commits of a pull request in their native order."""

    @abstractmethod
    def has_label(self, org: str, repo: str, name: str) -> bool:
        """Return True if the repository defines a label called ``name``."""

    @abstractmethod
    def get_issue_labels(self, org: str, repo: str, number: int) -> list[str]:
        """Return the label names currently applied to a pull request."""


class BaseRepoWriter(ABC):
    """Mutations applied to a pull request."""

    @abstractmethod
    def add_label(self, org: str, repo: str, number: int, label: str) -> None:
        """Apply ``label`` to the pull request."""

    @abstractmethod
    def remove_label(self, org: str, repo: str, number: int, label: str) -> None:
        """Remove ``label`` from the pull request."""

    @abstractmethod
    def create_comment(self, org: str, repo: str, number: int, body: str) -> None:
        """Post an issue comment on the pull request."""

    @abstractmethod
    def create_review(self, org: str, repo: str, number: int, body: str, event: str) -> None:
        """Submit a review with ``event`` of APPROVE or REQUEST_CHANGES."""
