"""Pydantic model for a single proofreading issue.

Issues arrive as loosely typed JSON: from the rule analyzer, from an LLM, or
from the browser cache. This model is the strict record at that boundary.
Field values are normalised (trimmed strings, enum-backed category, severity
and status) but the character range is deliberately left unchecked: the
reconciler clamps or discards bad ranges, since an LLM can legitimately
hallucinate offsets that no longer fit the text.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, List

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from jobaz.utils.offsets import utf16_to_index

from .enums import IssueCategory, IssueStatus, Severity

logger = logging.getLogger(__name__)

# Older front-end builds used "medium" instead of "moderate".
_SEVERITY_ALIASES = {"medium": Severity.MODERATE.value}


def _new_issue_id() -> str:
    return uuid.uuid4().hex


class ProofreadingIssue(BaseModel):
    """A flagged span of text with a category and a suggested replacement.

    Contract:
    - start_index / end_index: half-open range ``[start, end)`` into the text.
      Must be integers; may be negative, reversed or past the end.
    - category: one of the IssueCategory values (input key ``type`` accepted)
    - severity: one of the Severity values; defaults to low
    - status: open, applied or rejected; defaults to open
    - message: explanation shown to the user
    - original_text: the text the analyzer flagged (whitespace preserved)
    - suggestion_text: replacement used when the issue is applied
      (whitespace preserved; may be empty for advisory issues)

    Unknown keys are kept as extra attributes and passed through untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    issue_id: str = Field(
        default_factory=_new_issue_id,
        validation_alias=AliasChoices("issue_id", "id"),
    )
    start_index: int = Field(validation_alias=AliasChoices("start_index", "startIndex"))
    end_index: int = Field(validation_alias=AliasChoices("end_index", "endIndex"))
    category: IssueCategory = Field(validation_alias=AliasChoices("category", "type"))
    severity: Severity = Severity.LOW
    status: IssueStatus = IssueStatus.OPEN
    message: str = ""
    original_text: str = Field(
        default="",
        validation_alias=AliasChoices("original_text", "originalText", "original"),
    )
    suggestion_text: str = Field(
        default="",
        validation_alias=AliasChoices(
            "suggestion_text", "suggestionText", "suggestion"
        ),
    )

    @field_validator("issue_id", mode="before")
    def _normalise_id(cls, value: object) -> str:
        result = str(value or "").strip()
        return result or _new_issue_id()

    @field_validator("category", mode="before")
    def _normalise_category(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("status", mode="before")
    def _normalise_status(cls, value: object) -> object:
        if value is None or value == "":
            return IssueStatus.OPEN
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("severity", mode="before")
    def _normalise_severity(cls, value: object) -> object:
        if value is None or value == "":
            return Severity.LOW
        if isinstance(value, str):
            lowered = value.strip().lower()
            return _SEVERITY_ALIASES.get(lowered, lowered)
        return value

    @field_validator("message", mode="before")
    def _strip_message(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("original_text", "suggestion_text", mode="before")
    def _keep_whitespace(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)

    @property
    def is_open(self) -> bool:
        return self.status is IssueStatus.OPEN

    @property
    def span(self) -> tuple[int, int]:
        return (self.start_index, self.end_index)

    def with_status(self, status: IssueStatus) -> "ProofreadingIssue":
        """Return a copy of this issue carrying ``status``."""
        return self.model_copy(update={"status": status})

    def to_payload(self) -> dict[str, Any]:
        """Serialise using the camelCase keys the front end expects."""
        data = self.model_dump(mode="json")
        return {
            "id": data.pop("issue_id"),
            "type": data.pop("category"),
            "startIndex": data.pop("start_index"),
            "endIndex": data.pop("end_index"),
            "suggestion": data.pop("suggestion_text"),
            "original": data.pop("original_text"),
            **data,
        }


def issues_from_payload(
    payload: Any,
    *,
    utf16_text: str | None = None,
) -> List[ProofreadingIssue]:
    """Validate a batch of raw issue records, skipping the malformed ones.

    Args:
        payload: A list of issue dicts, or a dict holding them under ``issues``
        utf16_text: When given, ``startIndex``/``endIndex`` are treated as
            UTF-16 code-unit offsets into this text and converted to ``str``
            indices after validation.

    Returns:
        The records that passed validation, in input order.

    Raises:
        ValueError: If ``payload`` does not hold a list of records
    """
    records: Any
    if isinstance(payload, dict):
        records = payload.get("issues")
        if records is None:
            records = []
    else:
        records = payload
    if not isinstance(records, list):
        raise ValueError(
            f"Expected a list of issues or an object with an 'issues' list, got {type(records).__name__}"
        )

    issues: List[ProofreadingIssue] = []
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping issue %d: expected an object, got %r", position, record)
            continue
        try:
            issue = ProofreadingIssue.model_validate(record)
        except ValidationError as exc:
            logger.warning(
                "Skipping issue %d: %d validation error(s): %s",
                position,
                exc.error_count(),
                exc.errors(include_url=False),
            )
            continue
        if utf16_text is not None:
            issue = issue.model_copy(
                update={
                    "start_index": utf16_to_index(utf16_text, issue.start_index),
                    "end_index": utf16_to_index(utf16_text, issue.end_index),
                }
            )
        issues.append(issue)
    return issues
