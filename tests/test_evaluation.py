"""Tests for the eligibility decision function."""

from datetime import datetime, timedelta, timezone

import pytest

from services.evaluation import DEADLINE_PASSED, EligibilityStatus, evaluate, format_number
from services.profile import CandidateProfile, JobTerms
from services.requirements import RequirementSet

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def profile(**overrides):
    values = {
        "student_id": "S001",
        "branch": "CSE",
        "tenth_percent": 85.0,
        "twelfth_percent": 80.0,
        "ug_cgpa": 8.0,
        "pg_cgpa": None,
        "experience_years": 0.0,
    }
    values.update(overrides)
    return CandidateProfile(**values)


def job(requirement=None, deadline=None):
    return JobTerms(job_id=1, application_deadline=deadline, requirement=requirement)


class TestFormatNumber:
    @pytest.mark.parametrize("value, text", [(7.0, "7"), (7.5, "7.5"), (85.25, "85.25"), (0, "0")])
    def test_drops_trailing_zero(self, value, text):
        assert format_number(value) == text


class TestThresholds:
    def test_no_requirement_is_eligible(self):
        verdict = evaluate(profile(tenth_percent=None, ug_cgpa=None, branch=None), job(None), now=NOW)

        assert verdict.eligible is True
        assert verdict.status is EligibilityStatus.ELIGIBLE
        assert verdict.comments == ""
        assert verdict.checks.all_met()

    def test_absent_requirement_passes_even_without_data(self):
        verdict = evaluate(profile(pg_cgpa=None), job(RequirementSet(ug_cgpa=6.0)), now=NOW)

        assert verdict.checks.pg_cgpa_meets is True

    def test_ug_cgpa_below_requirement(self):
        verdict = evaluate(profile(ug_cgpa=7.0), job(RequirementSet(ug_cgpa=7.5)), now=NOW)

        assert verdict.checks.ug_cgpa_meets is False
        assert verdict.status is EligibilityStatus.NOT_ELIGIBLE
        assert "UG CGPA below requirement (7 < 7.5)" in verdict.comments

    def test_threshold_is_inclusive(self):
        verdict = evaluate(profile(ug_cgpa=7.5), job(RequirementSet(ug_cgpa=7.5)), now=NOW)

        assert verdict.eligible is True

    def test_missing_data_reason_not_below_reason(self):
        verdict = evaluate(profile(pg_cgpa=None), job(RequirementSet(pg_cgpa=6.5)), now=NOW)

        assert verdict.checks.pg_cgpa_meets is False
        assert verdict.comments == "PG CGPA data missing (required: 6.5)"
        assert "below" not in verdict.comments

    def test_zero_score_is_below_not_missing(self):
        verdict = evaluate(profile(tenth_percent=0.0), job(RequirementSet(tenth_percent=60)), now=NOW)

        assert verdict.comments == "10th percentage below requirement (0% < 60%)"

    def test_percentage_phrasing(self):
        verdict = evaluate(profile(twelfth_percent=None), job(RequirementSet(twelfth_percent=70)), now=NOW)

        assert verdict.comments == "12th percentage data missing (required: 70%)"

    def test_experience(self):
        requirement = RequirementSet(min_experience_yrs=1)

        short = evaluate(profile(experience_years=0.5), job(requirement), now=NOW)
        enough = evaluate(profile(experience_years=1.0), job(requirement), now=NOW)

        assert short.comments == "Experience below requirement (0.5 years < 1 years)"
        assert enough.checks.experience_meets is True


class TestBranch:
    requirement = RequirementSet(allowed_branches=("CSE", "ECE"))

    @pytest.mark.parametrize("branch", ["CSE", "cse", "Ece"])
    def test_case_insensitive_match(self, branch):
        verdict = evaluate(profile(branch=branch), job(self.requirement), now=NOW)

        assert verdict.checks.branch_meets is True

    def test_other_branch_rejected(self):
        verdict = evaluate(profile(branch="mech"), job(self.requirement), now=NOW)

        assert verdict.checks.branch_meets is False
        assert verdict.comments == "Branch not allowed (mech not in [CSE, ECE])"

    def test_unknown_branch(self):
        verdict = evaluate(profile(branch=None), job(self.requirement), now=NOW)

        assert verdict.comments == "Branch not allowed (unknown not in [CSE, ECE])"

    @pytest.mark.parametrize("allowed", [None, ()])
    def test_empty_allow_list_passes(self, allowed):
        verdict = evaluate(profile(branch="MECH"), job(RequirementSet(allowed_branches=allowed)), now=NOW)

        assert verdict.checks.branch_meets is True

    def test_all_means_any_branch(self):
        verdict = evaluate(profile(branch="CIVIL"), job(RequirementSet(allowed_branches=("CSE", "ALL"))), now=NOW)

        assert verdict.checks.branch_meets is True


class TestAggregate:
    def test_comments_follow_canonical_order(self):
        requirement = RequirementSet(
            tenth_percent=90,
            twelfth_percent=90,
            ug_cgpa=9,
            pg_cgpa=9,
            min_experience_yrs=2,
            allowed_branches=("ECE",),
        )

        verdict = evaluate(profile(), job(requirement), now=NOW)

        assert verdict.comments.split("; ") == [
            "10th percentage below requirement (85% < 90%)",
            "12th percentage below requirement (80% < 90%)",
            "UG CGPA below requirement (8 < 9)",
            "PG CGPA data missing (required: 9)",
            "Experience below requirement (0 years < 2 years)",
            "Branch not allowed (CSE not in [ECE])",
        ]

    def test_order_holds_for_partial_failures(self):
        requirement = RequirementSet(tenth_percent=90, allowed_branches=("ECE",))

        verdict = evaluate(profile(), job(requirement), now=NOW)

        assert verdict.comments == "10th percentage below requirement (85% < 90%); Branch not allowed (CSE not in [ECE])"

    def test_deterministic(self):
        requirement = RequirementSet(ug_cgpa=8.5, allowed_branches=("ECE",))

        first = evaluate(profile(), job(requirement), now=NOW)
        second = evaluate(profile(), job(requirement), now=NOW)

        assert first == second


class TestDeadline:
    def test_passed_deadline_short_circuits(self):
        verdict = evaluate(profile(), job(RequirementSet(ug_cgpa=9.5), deadline=NOW - timedelta(days=1)), now=NOW)

        assert verdict.eligible is False
        assert verdict.status is EligibilityStatus.NOT_ELIGIBLE
        assert verdict.comments == DEADLINE_PASSED
        assert verdict.checks is None
        assert verdict.deadline_passed

    def test_deadline_at_now_is_still_open(self):
        verdict = evaluate(profile(), job(deadline=NOW), now=NOW)

        assert verdict.eligible is True
