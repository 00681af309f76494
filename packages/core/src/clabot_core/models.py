"""CLA roster and compliance data models.

The roster types mirror the on-disk signers file one-to-one. The status
types are recomputed on every run and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Account:
    """A single identity: git name, git email and GitHub login."""

    name: str = ""
    email: str = ""
    login: str = ""


@dataclass
class Company:
    """A legal entity whose employees are covered by a corporate CLA.

    ``domains`` is informational only; matching is always per account.
    """

    name: str
    domains: list[str] = field(default_factory=list)
    people: list[Account] = field(default_factory=list)


@dataclass
class ExternalClaSigners:
    """Identities whose CLA is tracked by a process outside this tool."""

    people: list[Account] = field(default_factory=list)
    bots: list[Account] = field(default_factory=list)
    companies: list[Company] = field(default_factory=list)

    def all_people(self) -> list[Account]:
        accounts = list(self.people)
        for company in self.companies:
            accounts.extend(company.people)
        return accounts

    def all_accounts(self) -> list[Account]:
        return self.all_people() + list(self.bots)


@dataclass
class ClaSigners(ExternalClaSigners):
    """The CLA roster loaded once per run and treated as read-only."""

    external: ExternalClaSigners | None = None


@dataclass
class CommitStatus:
    """Compliance verdict for one commit.

    ``reasons`` holds every failure in detection order; ``reason`` is the
    last of them, which is what gets reported to the pull request.
    """

    sha: str
    compliant: bool = True
    external: bool = False
    reasons: list[str] = field(default_factory=list)

    @property
    def reason(self) -> str:
        return self.reasons[-1] if self.reasons else ""

    def fail(self, reason: str) -> None:
        self.compliant = False
        self.reasons.append(reason)


@dataclass
class PullRequestStatus:
    """Compliance verdict for a whole pull request.

    ``external`` means enforcement is skipped entirely; only the
    external-marker label is managed for such pull requests.
    """

    compliant: bool = True
    external: bool = False
    external_sha: str | None = None
    reasons: list[str] = field(default_factory=list)
    commits: list[CommitStatus] = field(default_factory=list)

    @property
    def reason(self) -> str:
        return self.reasons[-1] if self.reasons else ""
