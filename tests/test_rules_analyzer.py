from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from jobaz.analysis import AnalysisOptions, analyze_text, score_issues
from jobaz.errors import ContentTooShortError
from jobaz.highlight import ranges_overlap
from jobaz.issues import apply_issue
from jobaz.models import IssueCategory, ProofreadingIssue, Severity, WritingMode


def test_flags_common_typos_with_case_preserved() -> None:
    analysis = analyze_text("Teh cat sat on teh mat.")

    assert [issue.span for issue in analysis.issues] == [(0, 3), (15, 18)]
    assert [issue.suggestion_text for issue in analysis.issues] == ["The", "the"]
    assert all(issue.category is IssueCategory.SPELLING for issue in analysis.issues)
    assert all(issue.severity is Severity.LOW for issue in analysis.issues)
    assert analysis.score == 96
    assert analysis.notes == "Found 2 issues (0 high, 0 moderate, 2 low)."


def test_academic_mode_raises_severity() -> None:
    analysis = analyze_text("Teh cat sat on teh mat.", mode="academic")

    assert all(issue.severity is Severity.MODERATE for issue in analysis.issues)
    assert analysis.score == 90
    assert analysis.mode is WritingMode.ACADEMIC
    assert analysis.academic_level == "standard"


def test_clean_text_scores_full_marks() -> None:
    analysis = analyze_text("The cat sat on the mat.")

    assert analysis.issues == []
    assert analysis.score == 100
    assert analysis.notes == "Text looks good! No issues found."


@pytest.mark.parametrize("text", ["", "abc ", "   hi   "])
def test_rejects_too_short_content(text: str) -> None:
    with pytest.raises(ContentTooShortError):
        analyze_text(text)


def test_double_space_fix_can_be_applied() -> None:
    text = "Hello  world, this is fine."
    analysis = analyze_text(text)

    (issue,) = analysis.issues
    assert issue.span == (5, 7)
    assert issue.category is IssueCategory.GRAMMAR
    assert apply_issue(text, issue).text == "Hello world, this is fine."


def test_missing_space_after_full_stop() -> None:
    text = "I like cats.They are nice."
    (issue,) = analyze_text(text).issues

    assert issue.span == (12, 13)
    assert issue.severity is Severity.MODERATE
    assert apply_issue(text, issue).text == "I like cats. They are nice."


def test_disabled_families_are_skipped() -> None:
    analysis = analyze_text("Teh cat sat on teh mat.", options=AnalysisOptions(spelling=False))

    assert analysis.issues == []


def test_first_person_only_flagged_in_academic_modes() -> None:
    text = "I think the results are clear."

    assert analyze_text(text).issues == []

    (academic,) = analyze_text(text, mode=WritingMode.ACADEMIC).issues
    assert academic.span == (0, 7)
    assert academic.category is IssueCategory.ACADEMIC_TONE
    assert academic.severity is Severity.HIGH
    assert academic.suggestion_text == "This suggests"

    (research,) = analyze_text(text, mode=WritingMode.ACADEMIC_RESEARCH).issues
    assert research.category is IssueCategory.ACADEMIC_OBJECTIVITY


def test_uncited_claim_only_flagged_without_citation() -> None:
    (issue,) = analyze_text(
        "Studies show that sleep matters.", mode="academic_research"
    ).issues
    assert issue.category is IssueCategory.ACADEMIC_CITATION
    assert issue.original_text == "Studies show"

    cited = analyze_text("Studies show that sleep matters (Smith, 2020).", mode="academic_research")
    assert cited.issues == []


def test_passive_voice_is_limited_per_rule() -> None:
    analysis = analyze_text("It is done. It is done. It is done. It is done.")

    assert len(analysis.issues) == 3
    assert all(issue.category is IssueCategory.STYLE for issue in analysis.issues)
    assert analysis.detector_counts == {"style": 3}


def test_long_sentence_threshold_depends_on_mode() -> None:
    text = " ".join(["word"] * 41) + "."

    (issue,) = analyze_text(text).issues
    assert issue.category is IssueCategory.CLARITY
    assert issue.span == (0, len(text) - 1)

    assert analyze_text(" ".join(["word"] * 40) + ".").issues == []
    assert len(analyze_text(" ".join(["word"] * 31) + ".", mode="academic_research").issues) == 1


def test_max_issues_caps_results() -> None:
    analysis = analyze_text("teh teh teh teh teh", max_issues=2)

    assert [issue.span for issue in analysis.issues] == [(0, 3), (4, 7)]


def test_issues_are_sorted_disjoint_and_quote_the_text() -> None:
    text = (
        "I think this study aim to prove that it show results. Teh students is "
        "very very happy,  and we think its is alot better.Research proves that "
        "all students are tired."
    )

    for mode in WritingMode:
        issues = analyze_text(text, mode=mode).issues
        assert issues
        for issue in issues:
            assert issue.original_text == text[issue.start_index : issue.end_index]
        for left, right in zip(issues, issues[1:]):
            assert left.start_index <= right.start_index
            assert not ranges_overlap(*left.span, *right.span)


def test_to_payload_shape() -> None:
    payload = analyze_text("Teh cat sat.", mode="academic_research").to_payload()

    assert payload["overall"]["score"] == 95
    assert payload["metadata"] == {
        "writing_mode": "academic_research",
        "academic_level": "phd",
        "total_issues": 1,
    }
    assert payload["issues"][0]["type"] == "spelling"


def test_score_issues_is_clamped() -> None:
    issues = [
        ProofreadingIssue(start_index=i, end_index=i + 1, category="grammar", severity="high")
        for i in range(12)
    ]

    score, notes = score_issues(issues)

    assert score == 0
    assert notes == "Found 12 issues (12 high, 0 moderate, 0 low)."
    assert score_issues(issues[:1]) == (90, "Found 1 issue (1 high, 0 moderate, 0 low).")
