"""Tests for CLA label reconciliation."""

import pytest

from clabot_core.labels import (
    LABEL_CLA_EXTERNAL,
    LABEL_CLA_NO,
    LABEL_CLA_YES,
    LabelPlan,
    LabelStatus,
    apply_plan,
    reconcile_labels,
)
from clabot_core.models import PullRequestStatus

ALL_REPO_LABELS = LabelStatus(has_yes=True, has_no=True, has_external=True)
COMPLIANT = PullRequestStatus(compliant=True)
NOT_COMPLIANT = PullRequestStatus(compliant=False, reasons=["Committer is not listed"])
EXTERNAL = PullRequestStatus(external=True, external_sha="abc")


class TestLabelStatus:
    def test_from_names_is_case_insensitive(self):
        status = LabelStatus.from_names(["CLA: Yes", "bug"])
        assert status.has_yes is True
        assert status.has_no is False
        assert status.has_external is False

    def test_from_names_all(self):
        status = LabelStatus.from_names([LABEL_CLA_YES, LABEL_CLA_NO, LABEL_CLA_EXTERNAL])
        assert status == ALL_REPO_LABELS

    def test_has(self):
        assert LabelStatus(has_no=True).has(LABEL_CLA_NO) is True
        assert LabelStatus(has_no=True).has(LABEL_CLA_YES) is False


class TestReconcileLabels:
    def test_compliant_without_labels_adds_yes(self):
        plan = reconcile_labels(COMPLIANT, ALL_REPO_LABELS, LabelStatus())
        assert plan == LabelPlan(add=[LABEL_CLA_YES], remove=[])

    def test_compliant_with_yes_is_noop(self):
        plan = reconcile_labels(COMPLIANT, ALL_REPO_LABELS, LabelStatus(has_yes=True))
        assert plan.empty

    def test_compliant_removes_no_and_external(self):
        plan = reconcile_labels(COMPLIANT, ALL_REPO_LABELS, LabelStatus(has_no=True, has_external=True))
        assert plan.add == [LABEL_CLA_YES]
        assert plan.remove == [LABEL_CLA_NO, LABEL_CLA_EXTERNAL]

    def test_not_compliant_swaps_yes_for_no(self):
        plan = reconcile_labels(NOT_COMPLIANT, ALL_REPO_LABELS, LabelStatus(has_yes=True))
        assert plan.add == [LABEL_CLA_NO]
        assert plan.remove == [LABEL_CLA_YES]

    def test_not_compliant_with_no_is_noop(self):
        assert reconcile_labels(NOT_COMPLIANT, ALL_REPO_LABELS, LabelStatus(has_no=True)).empty

    def test_external_replaces_yes_and_no(self):
        plan = reconcile_labels(EXTERNAL, ALL_REPO_LABELS, LabelStatus(has_yes=True, has_no=True))
        assert plan.add == [LABEL_CLA_EXTERNAL]
        assert plan.remove == [LABEL_CLA_YES, LABEL_CLA_NO]

    def test_external_wins_over_non_compliance(self):
        status = PullRequestStatus(compliant=False, external=True, reasons=["ignored"])
        plan = reconcile_labels(status, ALL_REPO_LABELS, LabelStatus())
        assert plan.add == [LABEL_CLA_EXTERNAL]

    def test_label_not_defined_on_repo_is_not_added(self):
        repo_labels = LabelStatus(has_yes=True, has_no=True)
        plan = reconcile_labels(EXTERNAL, repo_labels, LabelStatus(has_yes=True))
        assert plan.add == []
        assert plan.remove == [LABEL_CLA_YES]

    def test_removal_not_gated_on_repo_labels(self):
        plan = reconcile_labels(COMPLIANT, LabelStatus(), LabelStatus(has_no=True))
        assert plan.add == []
        assert plan.remove == [LABEL_CLA_NO]

    @pytest.mark.parametrize("status", [COMPLIANT, NOT_COMPLIANT, EXTERNAL])
    @pytest.mark.parametrize(
        "issue_labels",
        [
            LabelStatus(),
            LabelStatus(has_yes=True),
            LabelStatus(has_no=True),
            LabelStatus(has_yes=True, has_no=True, has_external=True),
        ],
    )
    def test_second_pass_is_noop(self, status, issue_labels):
        first = reconcile_labels(status, ALL_REPO_LABELS, issue_labels)
        second = reconcile_labels(status, ALL_REPO_LABELS, apply_plan(issue_labels, first))
        assert second.empty


class TestApplyPlan:
    def test_applies_adds_and_removes(self):
        result = apply_plan(LabelStatus(has_yes=True), LabelPlan(add=[LABEL_CLA_NO], remove=[LABEL_CLA_YES]))
        assert result == LabelStatus(has_no=True)
