"""Proofread a document with an LLM and turn the completion into issues.

The completion is untrusted: records that fail validation are logged and
skipped, and character ranges are passed through unchecked for the
reconciler to clamp. Only a completion that is not JSON at all is an error.
"""

from __future__ import annotations

import logging
from typing import Any

from jobaz.errors import ContentTooShortError
from jobaz.llm.provider import LLMParseError
from jobaz.llm.service import LLMService
from jobaz.models import IssueCategory, WritingMode, issues_from_payload
from jobaz.prompt.render_prompt import render_prompts

from .rules import DEFAULT_MAX_ISSUES, MIN_CONTENT_LENGTH, ProofreadingAnalysis, score_issues

logger = logging.getLogger(__name__)

MODE_GUIDANCE = {
    WritingMode.GENERAL: (
        "Focus on spelling, grammar, clarity and a confident, professional tone."
    ),
    WritingMode.ACADEMIC: (
        "Also flag informal register, contractions, personal opinion and "
        "overstated claims expected to be avoided at university level."
    ),
    WritingMode.ACADEMIC_RESEARCH: (
        "Apply research standards: flag missing hedging, uncited claims, "
        "correlation presented as causation, unsupported generalisations and "
        "weak methodology descriptions."
    ),
}


def build_prompts(
    text: str,
    mode: WritingMode,
    max_issues: int = DEFAULT_MAX_ISSUES,
) -> tuple[str, str]:
    """Render the (system, user) prompt pair for ``text``."""
    context = {
        "mode": mode.value,
        "mode_guidance": MODE_GUIDANCE[mode],
        "categories": IssueCategory.all_values(),
        "text": text,
        "length": len(text),
        "max_issues": max_issues,
    }
    return render_prompts("proofreader_system.md", "proofreader_user.md", context)


class LLMProofreader:
    """Analyzer that delegates issue detection to an LLM service.

    The service must be built with the system prompt returned by
    :meth:`system_prompt`; only the user prompt is sent per document.
    """

    def __init__(
        self,
        service: LLMService,
        *,
        mode: WritingMode | str = WritingMode.GENERAL,
        max_issues: int = DEFAULT_MAX_ISSUES,
    ) -> None:
        self._service = service
        self.mode = WritingMode(mode)
        self.max_issues = max_issues

    @staticmethod
    def system_prompt(mode: WritingMode | str = WritingMode.GENERAL) -> str:
        system, _ = build_prompts("", WritingMode(mode))
        return system

    def analyze(self, text: str) -> ProofreadingAnalysis:
        """Ask the LLM for issues in ``text``.

        Raises:
            ContentTooShortError: If the stripped text is shorter than five characters.
            LLMParseError: If the completion holds no usable JSON.
            LLMQuotaError: If every provider is out of quota.
        """
        stripped_length = len(text.strip())
        if stripped_length < MIN_CONTENT_LENGTH:
            raise ContentTooShortError(stripped_length, MIN_CONTENT_LENGTH)

        _, user_prompt = build_prompts(text, self.mode, self.max_issues)
        payload = self._service.generate([user_prompt], filter_json=True)
        return self._to_analysis(payload, user_prompt)

    def _to_analysis(self, payload: Any, user_prompt: str) -> ProofreadingAnalysis:
        if not isinstance(payload, (dict, list)):
            raise LLMParseError(
                f"Expected a JSON object or list, got {type(payload).__name__}",
                response_text=str(payload),
                prompts=[user_prompt],
            )

        try:
            issues = issues_from_payload(payload)[: self.max_issues]
        except ValueError as exc:
            raise LLMParseError(
                str(exc), response_text=str(payload), prompts=[user_prompt]
            ) from exc
        score, notes = score_issues(issues)
        overall = payload.get("overall") if isinstance(payload, dict) else None
        if isinstance(overall, dict):
            score = _coerce_score(overall.get("score"), default=score)
            notes = str(overall.get("notes") or notes).strip()

        logger.info(
            "LLM analysis in %s mode returned %d usable issue(s)", self.mode.value, len(issues)
        )
        return ProofreadingAnalysis(score=score, notes=notes, issues=issues, mode=self.mode)


def _coerce_score(value: Any, *, default: int) -> int:
    try:
        score = int(value)
    except (TypeError, ValueError):
        return default
    return max(0, min(100, score))
