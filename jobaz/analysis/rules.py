"""Deterministic rule-based proofreading analyzer.

Runs offline and gives the same result for the same input, which makes it the
default analyzer and the reference used in tests. Each rule is a regular
expression with a category, a severity per writing mode and an optional
suggestion. Academic modes switch on extra rules for tone, objectivity,
hedging and citations, and tighten the long-sentence threshold.

Usage:
    analysis = analyze_text(text, mode=WritingMode.ACADEMIC)
    for issue in analysis.issues:
        ...
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterator, Mapping

from jobaz.errors import ContentTooShortError
from jobaz.highlight.reconciler import clamp_spans, resolve_overlaps
from jobaz.models import IssueCategory, ProofreadingIssue, Severity, WritingMode

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 5
DEFAULT_MAX_ISSUES = 50

# Maximum words per sentence before a clarity issue is raised.
LONG_SENTENCE_WORDS = {
    WritingMode.GENERAL: 40,
    WritingMode.ACADEMIC: 35,
    WritingMode.ACADEMIC_RESEARCH: 30,
}

_ALL_MODES = frozenset(WritingMode)
_ACADEMIC_MODES = frozenset({WritingMode.ACADEMIC, WritingMode.ACADEMIC_RESEARCH})
_RESEARCH_ONLY = frozenset({WritingMode.ACADEMIC_RESEARCH})

# [1], [1, 2], (Smith, 2020), (Smith et al. 2020), [Smith, 2020]
_CITATION_PATTERN = re.compile(
    r"\[[\d\s,]+\]"
    r"|\([A-Z][a-z]+(?:\s+et\s+al\.)?,?\s+\d{4}\)"
    r"|\[[A-Z][a-z]+(?:\s+et\s+al\.)?,?\s+\d{4}\]"
)
_CITATION_WINDOW = 100

SuggestionFn = Callable[[re.Match, WritingMode], str]


@dataclass(frozen=True)
class AnalysisOptions:
    """Which families of general-purpose checks to run."""

    spelling: bool = True
    grammar: bool = True
    style: bool = True
    clarity: bool = True

    def enabled(self, option: str | None) -> bool:
        return option is None or bool(getattr(self, option))


@dataclass
class ProofreadingAnalysis:
    """Result of one analysis run."""

    score: int
    notes: str
    issues: list[ProofreadingIssue]
    mode: WritingMode = WritingMode.GENERAL
    detector_counts: dict[str, int] = field(default_factory=dict)

    @property
    def academic_level(self) -> str:
        if self.mode is WritingMode.ACADEMIC_RESEARCH:
            return "phd"
        if self.mode is WritingMode.ACADEMIC:
            return "standard"
        return "general"

    def to_payload(self) -> dict:
        return {
            "overall": {"score": self.score, "notes": self.notes},
            "issues": [issue.to_payload() for issue in self.issues],
            "metadata": {
                "writing_mode": self.mode.value,
                "academic_level": self.academic_level,
                "total_issues": len(self.issues),
            },
        }


def _severity(
    general: Severity,
    academic: Severity | None = None,
    research: Severity | None = None,
) -> Mapping[WritingMode, Severity]:
    academic = academic or general
    return {
        WritingMode.GENERAL: general,
        WritingMode.ACADEMIC: academic,
        WritingMode.ACADEMIC_RESEARCH: research or academic,
    }


def _match_case(source: str, replacement: str) -> str:
    """Capitalise ``replacement`` when ``source`` starts with a capital."""
    if source[:1].isupper() and replacement:
        return replacement[0].upper() + replacement[1:]
    return replacement


def _fixed(suggestion: str) -> SuggestionFn:
    return lambda match, mode: _match_case(match.group(0), suggestion)


def _by_mode(general: str, academic: str) -> SuggestionFn:
    return lambda match, mode: _match_case(
        match.group(0), academic if mode.is_academic else general
    )


def _lacks_citation(text: str, match: re.Match) -> bool:
    start = max(0, match.start() - _CITATION_WINDOW)
    end = min(len(text), match.start() + _CITATION_WINDOW)
    return _CITATION_PATTERN.search(text, start, end) is None


@dataclass(frozen=True)
class PatternRule:
    """One regex detector.

    ``group`` selects which capture group becomes the issue range. ``limit``
    caps the matches reported per text. ``accept`` can veto a match after
    looking at its surroundings.
    """

    name: str
    pattern: re.Pattern
    category: IssueCategory
    message: str
    severity: Mapping[WritingMode, Severity]
    suggestion: SuggestionFn | None = None
    option: str | None = None
    modes: frozenset = _ALL_MODES
    research_category: IssueCategory | None = None
    group: int = 0
    limit: int | None = None
    accept: Callable[[str, re.Match], bool] | None = None

    def applies_to(self, mode: WritingMode, options: AnalysisOptions) -> bool:
        return mode in self.modes and options.enabled(self.option)

    def category_for(self, mode: WritingMode) -> IssueCategory:
        if mode is WritingMode.ACADEMIC_RESEARCH and self.research_category:
            return self.research_category
        return self.category

    def find(self, text: str, mode: WritingMode) -> Iterator[ProofreadingIssue]:
        found = 0
        for match in self.pattern.finditer(text):
            if self.limit is not None and found >= self.limit:
                return
            if self.accept is not None and not self.accept(text, match):
                continue
            found += 1
            start, end = match.span(self.group)
            flagged = match.group(self.group)
            yield ProofreadingIssue(
                issue_id=f"{self.name}-{start}",
                start_index=start,
                end_index=end,
                category=self.category_for(mode),
                severity=self.severity[mode],
                message=self.message.format(match=flagged),
                original_text=flagged,
                suggestion_text=self.suggestion(match, mode) if self.suggestion else "",
            )


def _rule(name: str, pattern: str, flags: int = re.IGNORECASE, **kwargs) -> PatternRule:
    return PatternRule(name=name, pattern=re.compile(pattern, flags), **kwargs)


_COMMON_TYPOS = {
    "alot": "a lot",
    "teh": "the",
    "adn": "and",
    "recieve": "receive",
    "recieved": "received",
    "seperate": "separate",
    "definately": "definitely",
    "occured": "occurred",
    "thier": "their",
    "wich": "which",
    "untill": "until",
}

_VAGUE_PHRASES = (
    # (pattern, academic replacement, general replacement)
    (r"\b(very)\s+important\b", "significant", "crucial"),
    (r"\b(really)\s+good\b", "effective", "excellent"),
    (r"\b(very)\s+bad\b", "problematic", "detrimental"),
    (r"\b(pretty)\s+(?:good|bad|sure)\b", "moderately", "quite"),
)

_FIRST_PERSON = (
    (r"\bI\s+think\b", "This suggests"),
    (r"\bI\s+believe\b", "The evidence indicates"),
    (r"\bIn\s+my\s+opinion\b", "From the analysis"),
    (r"\bI\s+feel\s+that\b", "The data shows that"),
    (r"\bI\s+would\s+say\b", "It can be argued"),
)

_CONTRACTIONS = {
    "can't": "cannot",
    "don't": "do not",
    "won't": "will not",
    "it's": "it is",
    "that's": "that is",
    "there's": "there is",
}

_PASSIVE_PARTICIPLES = (
    "done|made|given|taken|used|shown|seen|found|said|told|asked|thought|"
    "believed|known|expected|required|needed|wanted"
)


def _build_rules() -> list[PatternRule]:
    rules: list[PatternRule] = []

    # Spelling
    for typo, correct in _COMMON_TYPOS.items():
        rules.append(
            _rule(
                f"spell-{typo}",
                rf"\b{typo}\b",
                category=IssueCategory.SPELLING,
                message=f'Common spelling error: "{{match}}" should be "{correct}".',
                severity=_severity(Severity.LOW, Severity.MODERATE),
                suggestion=_fixed(correct),
                option="spelling",
            )
        )
    rules += [
        _rule(
            "spell-its",
            r"\b(its)\s+(?:is|was|will|has|had)\b",
            group=1,
            category=IssueCategory.SPELLING,
            message="\"its\" is possessive; the contraction \"it's\" is needed here.",
            severity=_severity(Severity.LOW, Severity.MODERATE),
            suggestion=lambda match, mode: _match_case(match.group(1), "it's"),
            option="spelling",
        ),
        _rule(
            "spell-loose",
            r"\b(loose)\s+(?:the|a|an|your|their|its)\b",
            group=1,
            category=IssueCategory.SPELLING,
            message='"loose" means not tight; the verb is "lose".',
            severity=_severity(Severity.LOW, Severity.MODERATE),
            suggestion=lambda match, mode: _match_case(match.group(1), "lose"),
            option="spelling",
        ),
    ]

    # Grammar
    rules += [
        _rule(
            "grammar-double-space",
            r"(?<=\S) {2,}(?=\S)",
            category=IssueCategory.GRAMMAR,
            message="Double space detected. Use a single space.",
            severity=_severity(Severity.LOW),
            suggestion=lambda match, mode: " ",
            option="grammar",
        ),
        _rule(
            "grammar-space-after-period",
            r"(?<=[a-z]\.)[A-Z]",
            flags=0,
            category=IssueCategory.GRAMMAR,
            message="Missing space after full stop.",
            severity=_severity(Severity.MODERATE),
            suggestion=lambda match, mode: " " + match.group(0),
            option="grammar",
        ),
        _rule(
            "grammar-students-is",
            r"\bstudents\s+is\b",
            category=IssueCategory.GRAMMAR,
            message="Subject-verb agreement: a plural subject takes a plural verb.",
            severity=_severity(Severity.MODERATE, Severity.HIGH),
            suggestion=_fixed("students are"),
            option="grammar",
        ),
        _rule(
            "grammar-it-verb",
            r"\bit\s+(show|cause|distract|suggest|prove)\b",
            group=1,
            category=IssueCategory.GRAMMAR,
            message='Subject-verb agreement: "it" takes "{match}s".',
            severity=_severity(Severity.MODERATE, Severity.HIGH),
            suggestion=lambda match, mode: match.group(1) + "s",
            option="grammar",
        ),
        _rule(
            "grammar-aim-to",
            r"\bthis\s+(?:research|study|paper|analysis)\s+(aim)\s+to\b",
            group=1,
            category=IssueCategory.GRAMMAR,
            message='Subject-verb agreement: a singular subject takes "aims".',
            severity=_severity(Severity.MODERATE, Severity.HIGH),
            suggestion=lambda match, mode: "aims",
            option="grammar",
        ),
    ]

    # Style
    rules.append(
        _rule(
            "style-very-very",
            r"\bvery\s+very\b",
            category=IssueCategory.STYLE,
            message='Repeated "very" weakens the writing. Use a stronger word instead.',
            severity=_severity(Severity.LOW, Severity.MODERATE),
            suggestion=_by_mode("extremely", "significantly"),
            option="style",
        )
    )
    for position, (pattern, academic, general) in enumerate(_VAGUE_PHRASES):
        rules.append(
            _rule(
                f"style-vague-{position}",
                pattern,
                group=1,
                category=IssueCategory.STYLE,
                message='Consider a more specific word than "{match}".',
                severity=_severity(Severity.LOW, Severity.MODERATE),
                suggestion=(
                    lambda match, mode, academic=academic, general=general: _match_case(
                        match.group(1), academic if mode.is_academic else general
                    )
                ),
                option="style",
            )
        )
    for auxiliary, participles in (
        ("is", f"being|been|{_PASSIVE_PARTICIPLES}"),
        ("was", f"being|{_PASSIVE_PARTICIPLES}"),
    ):
        rules.append(
            _rule(
                f"style-passive-{auxiliary}",
                rf"\b{auxiliary}\s+(?:{participles})\b",
                category=IssueCategory.STYLE,
                message="Possible passive voice. Consider the active voice for stronger writing.",
                severity=_severity(Severity.LOW),
                option="style",
                limit=3,
            )
        )

    # Academic tone and objectivity
    for position, (pattern, suggestion) in enumerate(_FIRST_PERSON):
        rules.append(
            _rule(
                f"academic-first-person-{position}",
                pattern,
                category=IssueCategory.ACADEMIC_TONE,
                research_category=IssueCategory.ACADEMIC_OBJECTIVITY,
                message="Avoid personal opinion. Use objective, evidence-based language.",
                severity=_severity(Severity.HIGH),
                suggestion=_fixed(suggestion),
                modes=_ACADEMIC_MODES,
            )
        )
    for contraction, expanded in _CONTRACTIONS.items():
        rules.append(
            _rule(
                f"academic-contraction-{contraction}",
                rf"\b{re.escape(contraction)}\b",
                category=IssueCategory.ACADEMIC_TONE,
                message="Avoid contractions in formal academic writing. Use the full form.",
                severity=_severity(Severity.MODERATE, Severity.MODERATE, Severity.HIGH),
                suggestion=_fixed(expanded),
                modes=_ACADEMIC_MODES,
            )
        )
    rules += [
        _rule(
            "academic-self-evaluation",
            r"\bthis\s+(?:research|study|paper|analysis)\s+(?:is\s+(?:really|very)\s+good|tries\s+to)\b",
            category=IssueCategory.ACADEMIC_TONE,
            research_category=IssueCategory.ACADEMIC_OBJECTIVITY,
            message="Avoid evaluating your own work. Let the evidence speak.",
            severity=_severity(Severity.HIGH),
            modes=_ACADEMIC_MODES,
        ),
        _rule(
            "academic-absolute-claim",
            r"\bthis\s+clearly\s+(?:proves?|shows?)\s+that\b",
            category=IssueCategory.CLARITY,
            message="This claim may need softer wording or supporting evidence.",
            severity=_severity(Severity.MODERATE),
            modes=_ACADEMIC_MODES,
        ),
    ]

    # Research and PhD level
    rules += [
        _rule(
            "research-overconfident",
            r"\b(?:proves?|proven|definitely|always|never)\s+that\b",
            category=IssueCategory.ACADEMIC_HEDGING,
            message='Overconfident claim. Hedge with "suggests", "indicates" or "may".',
            severity=_severity(Severity.HIGH),
            suggestion=lambda match, mode: "suggests that",
            modes=_RESEARCH_ONLY,
        ),
        _rule(
            "research-certainty-adverb",
            r"\b(?:clearly|obviously|undoubtedly|certainly)\s+(?:shows?|proves?|demonstrates?)\b",
            category=IssueCategory.ACADEMIC_HEDGING,
            message="Overconfident language weakens academic credibility.",
            severity=_severity(Severity.HIGH),
            suggestion=lambda match, mode: "suggests",
            modes=_RESEARCH_ONLY,
        ),
        _rule(
            "research-collective-opinion",
            r"\bwe\s+(?:think|believe|feel|consider)\b",
            category=IssueCategory.ACADEMIC_OBJECTIVITY,
            message="Avoid collective first-person opinion. Use objective language.",
            severity=_severity(Severity.HIGH),
            suggestion=_fixed("The analysis indicates"),
            modes=_RESEARCH_ONLY,
        ),
        _rule(
            "research-uncited-claim",
            r"\b(?:studies|research|evidence|findings)\s+(?:show|prove|demonstrate|indicate|suggest|reveal)\b",
            category=IssueCategory.ACADEMIC_CITATION,
            message="This claim may need a citation to support it.",
            severity=_severity(Severity.MODERATE),
            modes=_RESEARCH_ONLY,
            accept=_lacks_citation,
        ),
        _rule(
            "research-causation",
            r"\b(?:this|these|the)\s+(?:results?|findings?|data)\s+(?:proves?|demonstrates?|shows?)\s+that\s+\w+\s+(?:causes?|directly\s+affects?|leads?\s+to)\b",
            category=IssueCategory.METHODOLOGY,
            message='Findings show association, not necessarily causation. Prefer "is associated with".',
            severity=_severity(Severity.HIGH),
            modes=_RESEARCH_ONLY,
        ),
        _rule(
            "research-generalisation",
            r"\b(?:all|every|no\s+one)\s+(?:students?|people|researchers?|studies)\s+(?:are|is|do|does|have|has)\b",
            category=IssueCategory.METHODOLOGY,
            message='Unsupported generalisation. Qualify it ("many", "most", "tends to").',
            severity=_severity(Severity.HIGH),
            modes=_RESEARCH_ONLY,
        ),
    ]
    return rules


RULES: tuple[PatternRule, ...] = tuple(_build_rules())

_SENTENCE_PATTERN = re.compile(r"[^.!?]+")


def _long_sentence_issues(text: str, mode: WritingMode) -> Iterator[ProofreadingIssue]:
    limit = LONG_SENTENCE_WORDS[mode]
    for match in _SENTENCE_PATTERN.finditer(text):
        sentence = match.group(0)
        words = sentence.split()
        if len(words) <= limit:
            continue
        start = match.start() + (len(sentence) - len(sentence.lstrip()))
        end = match.end() - (len(sentence) - len(sentence.rstrip()))
        yield ProofreadingIssue(
            issue_id=f"clarity-long-{start}",
            start_index=start,
            end_index=end,
            category=IssueCategory.CLARITY,
            severity=Severity.MODERATE if mode.is_academic else Severity.LOW,
            message=(
                f"Long sentence ({len(words)} words). Consider breaking it into "
                "shorter sentences for clarity."
            ),
        )


def score_issues(issues: list[ProofreadingIssue]) -> tuple[int, str]:
    """Return an overall 0-100 score and a one-line summary."""
    total = len(issues)
    high = sum(1 for issue in issues if issue.severity is Severity.HIGH)
    moderate = sum(1 for issue in issues if issue.severity is Severity.MODERATE)
    low = total - high - moderate

    score = max(0, min(100, 100 - high * 10 - moderate * 5 - low * 2))
    if total == 0:
        return score, "Text looks good! No issues found."
    plural = "" if total == 1 else "s"
    return score, f"Found {total} issue{plural} ({high} high, {moderate} moderate, {low} low)."


def analyze_text(
    text: str,
    *,
    mode: WritingMode | str = WritingMode.GENERAL,
    options: AnalysisOptions | None = None,
    max_issues: int = DEFAULT_MAX_ISSUES,
) -> ProofreadingAnalysis:
    """Run every applicable rule over ``text``.

    Overlapping findings are resolved the same way the highlighter resolves
    them, so every returned issue can be displayed. ``original_text`` is
    always the exact slice of ``text`` the issue covers.

    Raises:
        ContentTooShortError: If the stripped text is shorter than five characters.
    """
    mode = WritingMode(mode)
    options = options or AnalysisOptions()
    stripped_length = len(text.strip())
    if stripped_length < MIN_CONTENT_LENGTH:
        raise ContentTooShortError(stripped_length, MIN_CONTENT_LENGTH)

    candidates: list[ProofreadingIssue] = []
    for rule in RULES:
        if rule.applies_to(mode, options):
            candidates.extend(rule.find(text, mode))
    if options.clarity:
        candidates.extend(_long_sentence_issues(text, mode))

    detector_counts = Counter(issue.category.value for issue in candidates)

    spans = resolve_overlaps(clamp_spans(text, candidates))[:max_issues]
    issues = [
        span.issue.model_copy(update={"original_text": text[span.start : span.end]})
        for span in spans
    ]
    score, notes = score_issues(issues)

    logger.info(
        "Analysed %d characters in %s mode: %d candidate(s), %d issue(s) kept, detector counts %s",
        len(text),
        mode.value,
        len(candidates),
        len(issues),
        dict(detector_counts),
    )
    return ProofreadingAnalysis(
        score=score,
        notes=notes,
        issues=issues,
        mode=mode,
        detector_counts=dict(detector_counts),
    )
