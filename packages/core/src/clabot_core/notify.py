"""Notification policies that accompany a CLA verdict.

Two alternative styles are supported and chosen by configuration:

  comment  — post an issue comment only when the pull request newly
             transitions to "cla: no" during this run.
  review   — submit an APPROVE or REQUEST_CHANGES review on every run.

``none`` manages labels only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from clabot_core.labels import LABEL_CLA_NO, LABEL_CLA_YES, LabelPlan
from clabot_core.models import PullRequestStatus

REVIEW_APPROVE = "APPROVE"
REVIEW_REQUEST_CHANGES = "REQUEST_CHANGES"

APPROVE_BODY = "All commit authors and committers are listed as CLA signers."


class NotificationPolicy(str, Enum):
    COMMENT = "comment"
    REVIEW = "review"
    NONE = "none"


@dataclass(frozen=True)
class Notification:
    """A comment (``event`` is None) or a review with the given event."""

    body: str
    event: str | None = None

    @property
    def is_review(self) -> bool:
        return self.event is not None


def build_comment(reason: str) -> str:
    return (
        "Thanks for your pull request! Before it can be reviewed, every commit author "
        "and committer needs to be covered by a Contributor License Agreement (CLA).\n\n"
        f"> {reason}\n\n"
        f"This pull request has been labeled `{LABEL_CLA_NO}`. The label is updated "
        "automatically once the CLA records match."
    )


def plan_notifications(
    policy: NotificationPolicy,
    status: PullRequestStatus,
    plan: LabelPlan,
) -> list[Notification]:
    """Decide which notifications accompany this verdict.

    Externally managed pull requests never get compliance notifications.
    """
    if status.external or policy is NotificationPolicy.NONE:
        return []

    if policy is NotificationPolicy.REVIEW:
        if status.compliant:
            return [Notification(body=APPROVE_BODY, event=REVIEW_APPROVE)]
        return [Notification(body=status.reason, event=REVIEW_REQUEST_CHANGES)]

    transitioned = LABEL_CLA_NO in plan.add or LABEL_CLA_YES in plan.remove
    if not status.compliant and transitioned:
        return [Notification(body=build_comment(status.reason))]
    return []
