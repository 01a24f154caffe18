"""
Pydantic models for exam extractions and the reconciled result.

Upstream providers are sloppy: a score may arrive as "85", as null, or not at
all. The input models absorb that at the boundary so the reconciler only ever
sees text (possibly empty) and floats (possibly None or non-finite).
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ─── Enums ──────────────────────────────────────────────────────────


class ValidationStatus(str, Enum):
    """Outcome of comparing one field across the two sources."""

    CONSISTENT = "consistent"  # Both agree (exactly, normalized, or within tolerance)
    INCONSISTENT = "inconsistent"  # Both present and materially different
    UNCERTAIN = "uncertain"  # At least one side missing, agreement unknown


class ConfidenceLevel(str, Enum):
    """Self-reported confidence attached to a question finding."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


CONFIDENCE_RANK: dict[ConfidenceLevel, int] = {
    ConfidenceLevel.HIGH: 3,
    ConfidenceLevel.MEDIUM: 2,
    ConfidenceLevel.LOW: 1,
}


class _CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─── Input Coercion ─────────────────────────────────────────────────


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _coerce_number(value: Any) -> float | None:
    """Numbers and numeric strings become floats; anything else becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return None
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


# ─── Extraction Models (input) ──────────────────────────────────────


class ExamMeta(_CamelModel):
    """Exam-level header fields. Unknown keys are kept and ignored."""

    model_config = ConfigDict(extra="allow")

    exam_name: str = ""
    subject: str = ""
    score: Optional[float] = None
    full_score: Optional[float] = None

    @field_validator("exam_name", "subject", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("score", "full_score", mode="before")
    @classmethod
    def _number(cls, value: Any) -> float | None:
        return _coerce_number(value)


class Observations(_CamelModel):
    """Per-question findings as raw tagged lines."""

    model_config = ConfigDict(extra="allow")

    problems: list[str] = Field(default_factory=list)

    @field_validator("problems", mode="before")
    @classmethod
    def _lines(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if not isinstance(value, (list, tuple)):
            return []
        return [_coerce_text(item) for item in value]


class ExtractedData(_CamelModel):
    """One provider's structured reading of an exam paper."""

    model_config = ConfigDict(extra="allow")

    meta: ExamMeta = Field(default_factory=ExamMeta)
    observations: Observations = Field(default_factory=Observations)

    @field_validator("meta", "observations", mode="before")
    @classmethod
    def _section(cls, value: Any) -> Any:
        # A null or non-object section degrades to an empty one
        return value if isinstance(value, (dict, BaseModel)) else {}


# ─── Question Finding ───────────────────────────────────────────────

_SCORE_PARTS_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*/\s*(\d+(?:\.\d+)?)\s*$")


class ProblemInfo(_CamelModel):
    """A single question finding, parsed from one tagged line."""

    model_config = ConfigDict(frozen=True)

    question_no: str = ""
    score: str = ""  # Raw "earned/total" text, never reparsed by the engine
    knowledge: str = ""
    error_type: str = ""
    evidence: str = ""
    confidence: ConfidenceLevel = ConfidenceLevel.MEDIUM

    def score_parts(self) -> tuple[float, float] | None:
        """Parse the raw score text as ``(earned, total)``; None if not that shape."""
        match = _SCORE_PARTS_RE.match(self.score)
        if not match:
            return None
        return float(match.group(1)), float(match.group(2))


# ─── Ledger ─────────────────────────────────────────────────────────

FIELD_DISAGREEMENT = "FIELD_DISAGREEMENT"
BOTH_UNCERTAIN = "BOTH_UNCERTAIN"
QUESTION_DISAGREEMENT = "QUESTION_DISAGREEMENT"

# Entries with these codes pause the workflow for human review
CONFIRMATION_CODES: frozenset[str] = frozenset({
    FIELD_DISAGREEMENT, BOTH_UNCERTAIN, QUESTION_DISAGREEMENT,
})


class ValidationInconsistency(_CamelModel):
    """One disputed field or question, as recorded in the ledger."""

    field: str  # e.g. "score" or "problem_第3题"
    code: str  # Machine-readable, e.g. "FIELD_DISAGREEMENT"
    primary_value: Any = None
    secondary_value: Any = None
    selected_value: Any = None
    reason: str


# ─── Validated Result (output) ──────────────────────────────────────


class FieldStatuses(_CamelModel):
    """One status per tracked field."""

    exam_name: ValidationStatus
    subject: ValidationStatus
    score: ValidationStatus
    full_score: ValidationStatus
    problems: ValidationStatus


class ValidationDetails(_CamelModel):
    primary_provider: str
    secondary_provider: str
    inconsistencies: list[ValidationInconsistency] = Field(default_factory=list)
    needs_user_confirmation: bool = False


class ValidatedResult(_CamelModel):
    """The reconciled exam record plus the account of where sources disagreed."""

    exam_name: str
    subject: str
    score: Optional[float] = None
    full_score: Optional[float] = None
    problems: list[ProblemInfo] = Field(default_factory=list)
    validation_status: FieldStatuses
    validation_details: ValidationDetails

    def disputed_fields(self) -> list[str]:
        """Ledger field names, in ledger order."""
        return [inc.field for inc in self.validation_details.inconsistencies]
