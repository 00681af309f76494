"""CLA enforcement across the pull requests of an organization or repository."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from github import GithubException
from rich.console import Console
from rich.markup import escape

from clabot_core.compliance import ComplianceChecker
from clabot_core.gh.base import BaseRepoReader, BaseRepoWriter
from clabot_core.labels import (
    LABEL_CLA_EXTERNAL,
    LABEL_CLA_NO,
    LABEL_CLA_YES,
    LabelStatus,
    RepoLabelStatus,
    reconcile_labels,
)
from clabot_core.models import PullRequestStatus
from clabot_core.notify import NotificationPolicy, plan_notifications

console = Console()

MUTATION_ADD_LABEL = "add_label"
MUTATION_REMOVE_LABEL = "remove_label"
MUTATION_COMMENT = "comment"
MUTATION_REVIEW = "review"


@dataclass
class ProcessSpec:
    """What to process: one org, optionally one repo and specific pull requests."""

    org: str
    repo: str | None = None
    pulls: list[int] = field(default_factory=list)
    update_repo: bool = False


@dataclass
class Mutation:
    """One intended write. ``applied`` is False in dry runs and on failure."""

    kind: str  # one of the MUTATION_* constants
    detail: str
    applied: bool = False
    error: str | None = None


@dataclass
class PullRequestResult:
    repo: str
    number: int
    title: str = ""
    status: PullRequestStatus | None = None
    mutations: list[Mutation] = field(default_factory=list)
    error: str | None = None

    @property
    def verdict(self) -> str:
        if self.error is not None or self.status is None:
            return "error"
        if self.status.external:
            return "external"
        return "compliant" if self.status.compliant else "not compliant"


@dataclass
class RunSummary:
    """Everything a run looked at, for reporting by the CLI."""

    org: str
    results: list[PullRequestResult] = field(default_factory=list)
    repo_errors: dict[str, str] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return bool(self.repo_errors) or any(r.error is not None for r in self.results)


class ClaProcessor:
    """Checks every pull request in scope and reconciles its CLA labels.

    Repositories and pull requests are processed one at a time. A failed
    read skips the affected repository or pull request; a failed write is
    logged and the run carries on, since the next run reconciles again.
    Nothing is written unless ``ProcessSpec.update_repo`` is set.
    """

    def __init__(
        self,
        reader: BaseRepoReader,
        writer: BaseRepoWriter,
        checker: ComplianceChecker,
        policy: NotificationPolicy = NotificationPolicy.COMMENT,
        logger: logging.Logger | None = None,
    ):
        self.reader = reader
        self.writer = writer
        self.checker = checker
        self.policy = NotificationPolicy(policy)
        self.log = logger or logging.getLogger(__name__)

    def get_repo_label_status(self, org: str, repo: str) -> RepoLabelStatus:
        return LabelStatus(
            has_yes=self.reader.has_label(org, repo, LABEL_CLA_YES),
            has_no=self.reader.has_label(org, repo, LABEL_CLA_NO),
            has_external=self.reader.has_label(org, repo, LABEL_CLA_EXTERNAL),
        )

    def process_org_repo(self, spec: ProcessSpec) -> RunSummary:
        """Process ``spec.repo`` in ``spec.org``, or every repository when it is unset."""
        summary = RunSummary(org=spec.org)
        try:
            repos = self.reader.get_repos(spec.org, spec.repo)
        except GithubException as e:
            target = f"{spec.org}/{spec.repo}" if spec.repo else spec.org
            self.log.error("Error looking up repositories for %s: %s", target, e)
            summary.repo_errors[spec.repo or spec.org] = str(e)
            return summary

        for repo in repos:
            console.print(f"[bold]Repo: {escape(spec.org)}/{escape(repo)}[/bold]")
            try:
                # Explicit numbers are fetched one by one below so a bad number
                # only fails its own result.
                pulls = [] if spec.pulls else list(self.reader.get_pulls(spec.org, repo))
                repo_labels = self.get_repo_label_status(spec.org, repo)
            except GithubException as e:
                self.log.error("Error listing pull requests for %s/%s: %s", spec.org, repo, e)
                summary.repo_errors[repo] = str(e)
                continue

            for missing in (label for label in (LABEL_CLA_YES, LABEL_CLA_NO) if not repo_labels.has(label)):
                self.log.warning("Repo %s/%s does not define the %r label", spec.org, repo, missing)

            for number in spec.pulls:
                try:
                    pull = self.reader.get_pull(spec.org, repo, number)
                except GithubException as e:
                    self.log.error("Error fetching %s/%s PR %d: %s", spec.org, repo, number, e)
                    summary.results.append(PullRequestResult(repo=repo, number=number, error=str(e)))
                    continue
                summary.results.append(
                    self.process_pull_request(spec.org, repo, pull, repo_labels, update_repo=spec.update_repo)
                )

            for pull in pulls:
                summary.results.append(
                    self.process_pull_request(spec.org, repo, pull, repo_labels, update_repo=spec.update_repo)
                )
        return summary

    def process_pull_request(
        self,
        org: str,
        repo: str,
        pull,
        repo_labels: RepoLabelStatus,
        update_repo: bool = False,
    ) -> PullRequestResult:
        number = pull.number
        result = PullRequestResult(repo=repo, number=number, title=pull.title or "")
        console.print(f"PR {number}: {escape(result.title)}")

        try:
            status = self.checker.check_pull_request(self.reader.get_commits(org, repo, number))
            issue_labels = LabelStatus.from_names(self.reader.get_issue_labels(org, repo, number))
        except GithubException as e:
            self.log.error("Error processing %s/%s PR %d: %s", org, repo, number, e)
            result.error = str(e)
            return result
        result.status = status

        if status.external:
            console.print(f"  [cyan]PR has externally managed commits ({status.external_sha})[/cyan]")
        elif status.compliant:
            console.print("  [green]PR is CLA-compliant[/green]")
        else:
            console.print(f"  [red]PR is NOT CLA-compliant:[/red] {escape(status.reason)}")

        plan = reconcile_labels(status, repo_labels, issue_labels)
        if plan.empty:
            self.log.info("No label changes needed for %s/%s PR %d", org, repo, number)

        for label in plan.remove:
            result.mutations.append(
                self._apply(
                    Mutation(MUTATION_REMOVE_LABEL, label),
                    lambda label=label: self.writer.remove_label(org, repo, number, label),
                    update_repo,
                )
            )
        for label in plan.add:
            result.mutations.append(
                self._apply(
                    Mutation(MUTATION_ADD_LABEL, label),
                    lambda label=label: self.writer.add_label(org, repo, number, label),
                    update_repo,
                )
            )

        for note in plan_notifications(self.policy, status, plan):
            if note.is_review:
                mutation = self._apply(
                    Mutation(MUTATION_REVIEW, note.event),
                    lambda note=note: self.writer.create_review(org, repo, number, note.body, note.event),
                    update_repo,
                )
            else:
                mutation = self._apply(
                    Mutation(MUTATION_COMMENT, note.body),
                    lambda note=note: self.writer.create_comment(org, repo, number, note.body),
                    update_repo,
                )
            result.mutations.append(mutation)

        return result

    def _apply(self, mutation: Mutation, write: Callable[[], None], update_repo: bool) -> Mutation:
        """Perform ``write`` if updates are enabled; always log the intent."""
        summary = mutation.detail.splitlines()[0] if mutation.detail else ""
        console.print(f"  {mutation.kind.replace('_', ' ')}: {escape(summary)}")
        if not update_repo:
            console.print("  [dim]... but --update-repo is disabled; skipping[/dim]")
            return mutation
        try:
            write()
        except GithubException as e:
            self.log.error("Error applying %s (%s): %s", mutation.kind, summary, e)
            mutation.error = str(e)
            return mutation
        mutation.applied = True
        return mutation
