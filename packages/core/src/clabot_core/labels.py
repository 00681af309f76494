"""Desired-vs-observed reconciliation of the CLA labels on a pull request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from clabot_core.models import PullRequestStatus

# Labels expected to be predefined on each repository. A repository that
# lacks one of them simply never receives it.
LABEL_CLA_YES = "cla: yes"
LABEL_CLA_NO = "cla: no"
LABEL_CLA_EXTERNAL = "cla: external"

CLA_LABELS = (LABEL_CLA_YES, LABEL_CLA_NO, LABEL_CLA_EXTERNAL)


@dataclass(frozen=True)
class LabelStatus:
    """Which of the three CLA labels are present."""

    has_yes: bool = False
    has_no: bool = False
    has_external: bool = False

    def has(self, label: str) -> bool:
        return {
            LABEL_CLA_YES: self.has_yes,
            LABEL_CLA_NO: self.has_no,
            LABEL_CLA_EXTERNAL: self.has_external,
        }[label]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> LabelStatus:
        """Build a status from label names, compared case-insensitively."""
        lowered = {n.lower() for n in names}
        return cls(
            has_yes=LABEL_CLA_YES in lowered,
            has_no=LABEL_CLA_NO in lowered,
            has_external=LABEL_CLA_EXTERNAL in lowered,
        )


# Repository-level: which labels are defined. Issue-level: which are applied.
RepoLabelStatus = LabelStatus
IssueLabelStatus = LabelStatus


@dataclass
class LabelPlan:
    """Label deltas needed to move a pull request to its desired state."""

    add: list[str] = field(default_factory=list)
    remove: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.add and not self.remove


def desired_label(status: PullRequestStatus) -> str:
    if status.external:
        return LABEL_CLA_EXTERNAL
    if status.compliant:
        return LABEL_CLA_YES
    return LABEL_CLA_NO


def reconcile_labels(
    status: PullRequestStatus,
    repo_labels: RepoLabelStatus,
    issue_labels: IssueLabelStatus,
) -> LabelPlan:
    """Compute the minimal label changes for a pull request.

    Exactly one CLA label is desired. It is added only when missing and
    defined on the repository; the other two are removed when present.
    Running this against an already-reconciled pull request yields an
    empty plan.
    """
    wanted = desired_label(status)
    plan = LabelPlan()
    for label in CLA_LABELS:
        if label != wanted and issue_labels.has(label):
            plan.remove.append(label)
    if not issue_labels.has(wanted) and repo_labels.has(wanted):
        plan.add.append(wanted)
    return plan


def apply_plan(issue_labels: IssueLabelStatus, plan: LabelPlan) -> IssueLabelStatus:
    """Return the label status a pull request will have once ``plan`` is applied."""
    names = {label for label in CLA_LABELS if issue_labels.has(label)}
    names.difference_update(plan.remove)
    names.update(plan.add)
    return LabelStatus.from_names(names)
