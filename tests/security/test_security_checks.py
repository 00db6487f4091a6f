from datetime import datetime

import pytest

from repokit.security import CheckOutcome, SecurityCheck, ValidationTally, score_label, write_report
from repokit.security.report import render_report, report_filename


def test_check_outcomes():
    assert SecurityCheck("Files", "README.md exists", lambda: True).evaluate() is CheckOutcome.PASSED
    assert SecurityCheck("Files", "LICENSE exists", lambda: False).evaluate() is CheckOutcome.FAILED
    assert (
        SecurityCheck("Files", "Dependabot", lambda: False, is_warning=True).evaluate()
        is CheckOutcome.WARNING
    )


def test_raising_predicate_counts_as_false():
    def broken():
        raise KeyError("permissions")

    assert SecurityCheck("Access", "Admin", broken).evaluate() is CheckOutcome.FAILED
    assert SecurityCheck("Access", "Admin", broken, is_warning=True).evaluate() is CheckOutcome.WARNING


def test_tally():
    tally = ValidationTally()
    for outcome in [CheckOutcome.PASSED] * 7 + [CheckOutcome.FAILED, CheckOutcome.WARNING, CheckOutcome.WARNING]:
        tally.record(outcome)

    assert (tally.passed, tally.failed, tally.warnings) == (7, 1, 2)
    assert tally.total == 10
    assert tally.score == 70
    assert tally.label == "Moderate"
    assert tally.exit_code == 1


def test_warnings_do_not_fail():
    tally = ValidationTally(passed=3, warnings=5)
    assert tally.exit_code == 0
    assert tally.score == 37


def test_empty_tally():
    assert ValidationTally().score == 0
    assert ValidationTally().exit_code == 0


@pytest.mark.parametrize(
    "score, label",
    [(100, "Excellent"), (90, "Excellent"), (89, "Good"), (75, "Good"), (60, "Moderate"), (59, "Needs improvement")],
)
def test_score_label(score, label):
    assert score_label(score) == label


def test_report_filename():
    when = datetime(2024, 3, 9, 14, 5, 7)
    assert report_filename(when) == "security-validation-report-20240309_140507.md"


def test_render_report():
    content = render_report("acme/weather", ValidationTally(passed=9, failed=0, warnings=1), datetime(2024, 3, 9))
    assert "**Repository:** acme/weather" in content
    assert "**Overall Security Score:** 90% (Excellent)" in content
    assert "- All critical security checks passed ✅" in content
    assert "- Consider addressing warning items" in content


def test_write_report(tmp_path):
    when = datetime(2024, 3, 9, 14, 5, 7)
    path = write_report(str(tmp_path), "acme/weather", ValidationTally(failed=1), when)
    assert path == str(tmp_path / "security-validation-report-20240309_140507.md")
    assert "Review and address all failed security checks" in (tmp_path / path).read_text()
