"""CLA compliance decisions for commits and pull requests.

Commit objects are anything shaped like PyGithub's ``Commit``: the GitHub
user association lives on ``commit.author`` / ``commit.committer`` (login
only), while the git metadata lives on ``commit.commit.author`` /
``commit.commit.committer`` (name and email only). Either side may be None
when GitHub could not link the identity to an account.
"""

from __future__ import annotations

import logging
from typing import Iterable

from clabot_core.matching import match_account, match_login
from clabot_core.models import Account, ClaSigners, CommitStatus, PullRequestStatus

logger = logging.getLogger(__name__)

REASON_AUTHOR_IDENTITY = (
    "Please verify the author name, email, and GitHub username association "
    "are all correct and match CLA records."
)
REASON_COMMITTER_IDENTITY = (
    "Please verify the committer name, email, and GitHub username association "
    "are all correct and match CLA records."
)
REASON_AUTHOR_NOT_SIGNER = (
    "Author of one or more commits is not listed as a CLA signer, "
    "either individual or as a member of an organization."
)
REASON_COMMITTER_NOT_SIGNER = (
    "Committer of one or more commits is not listed as a CLA signer, "
    "either individual or as a member of an organization."
)


def _attr(obj, name: str) -> str:
    value = getattr(obj, name, None) if obj is not None else None
    return value or ""


def extract_identities(commit) -> tuple[Account, Account]:
    """Return the (author, committer) accounts for a commit.

    Missing values come back as empty strings rather than None.
    """
    git = getattr(commit, "commit", None)
    git_author = getattr(git, "author", None) if git is not None else None
    git_committer = getattr(git, "committer", None) if git is not None else None

    author = Account(
        name=_attr(git_author, "name"),
        email=_attr(git_author, "email"),
        login=_attr(getattr(commit, "author", None), "login"),
    )
    committer = Account(
        name=_attr(git_committer, "name"),
        email=_attr(git_committer, "email"),
        login=_attr(getattr(commit, "committer", None), "login"),
    )
    return author, committer


def _is_complete(account: Account) -> bool:
    return bool(account.name and account.email and account.login)


class ComplianceChecker:
    """Evaluates commits against a CLA roster.

    ``unknown_as_external`` treats any commit whose logins are absent from
    the whole roster as externally managed instead of non-compliant.
    """

    def __init__(self, cla_signers: ClaSigners, unknown_as_external: bool = False):
        self.cla_signers = cla_signers
        self.unknown_as_external = unknown_as_external

    def is_external(self, commit) -> bool:
        """Return True if the commit's CLA is managed outside this tool.

        Login-only and case-sensitive. The external roster is consulted
        before the main one, so a login listed in both is external.
        """
        author, committer = extract_identities(commit)
        logins = [login for login in (author.login, committer.login) if login]
        if not logins:
            return False

        external = self.cla_signers.external
        if external is not None and match_login(logins, external.all_accounts()):
            return True

        if self.unknown_as_external and not match_login(logins, self.cla_signers.all_accounts()):
            return True

        return False

    def check_commit(self, commit) -> CommitStatus:
        """Decide whether a single commit satisfies the CLA roster."""
        author, committer = extract_identities(commit)
        status = CommitStatus(sha=getattr(commit, "sha", "") or "")

        if not _is_complete(author):
            status.fail(REASON_AUTHOR_IDENTITY)
        if not _is_complete(committer):
            status.fail(REASON_COMMITTER_IDENTITY)

        # Both identities are complete; check them against the roster.
        # Bots may commit (e.g. merge or rebase bots) but not author.
        if status.compliant:
            if not match_account(author, self.cla_signers.all_people()):
                status.fail(REASON_AUTHOR_NOT_SIGNER)
            if not match_account(committer, self.cla_signers.all_accounts()):
                status.fail(REASON_COMMITTER_NOT_SIGNER)

        logger.debug("commit %s author: %s <%s>, GitHub: %s", status.sha, author.name, author.email, author.login)
        logger.debug(
            "commit %s committer: %s <%s>, GitHub: %s", status.sha, committer.name, committer.email, committer.login
        )
        return status

    def check_pull_request(self, commits: Iterable) -> PullRequestStatus:
        """Combine per-commit verdicts into one pull request verdict.

        Stops at the first externally managed commit: the remaining commits
        are not evaluated and no compliance reason is reported. Otherwise
        the pull request is compliant only if every commit is, and the last
        failing commit's reason wins.

        Errors raised while iterating ``commits`` (e.g. a paginated API
        listing) propagate to the caller unchanged.
        """
        result = PullRequestStatus()
        for commit in commits:
            if self.is_external(commit):
                result.external = True
                result.external_sha = getattr(commit, "sha", None)
                logger.info("commit %s is externally managed; skipping CLA checks", result.external_sha)
                break

            status = self.check_commit(commit)
            result.commits.append(status)
            if not status.compliant:
                logger.info("commit %s is not CLA-compliant: %s", status.sha, status.reason)
                result.compliant = False
                result.reasons.append(status.reason)
        return result
