"""
Reconciliation of single-valued exam fields (exam name, subject, score, full score).

Every field goes through two steps:
  1. compare_*  → a ValidationStatus (consistent / inconsistent / uncertain)
  2. select_*   → the value we keep, plus ledger entries for anything disputed

The tie-break rules are grading heuristics, not generic conflict resolution:
  - text:       keep the longer (more detailed) reading
  - score:      keep the LOWER value; never over-credit the student
  - fullScore:  keep whichever sits closer to a common paper total
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_COMMON_FULL_SCORES
from .models import (
    BOTH_UNCERTAIN,
    FIELD_DISAGREEMENT,
    ValidationInconsistency,
    ValidationStatus,
)
from .similarity import normalize_text, similarity

logger = logging.getLogger(__name__)

_BOTH_UNCERTAIN_REASON = "Both sources uncertain, defaulted to primary result"


@dataclass
class FieldOutcome:
    """Result of reconciling one scalar field."""

    status: ValidationStatus
    value: Any
    inconsistencies: list[ValidationInconsistency] = field(default_factory=list)


# ─── Text Fields ─────────────────────────────────────────────────────


def _clean(value: object) -> str:
    return str(value or "").strip()


def compare_strings(
    primary: object, secondary: object, similarity_threshold: float = 0.8
) -> ValidationStatus:
    """Judge whether two text readings agree."""
    a = _clean(primary)
    b = _clean(secondary)

    if not a or not b:
        return ValidationStatus.UNCERTAIN
    if a == b:
        return ValidationStatus.CONSISTENT

    # Spacing and punctuation are the commonest OCR/LLM drift
    if normalize_text(a) == normalize_text(b):
        return ValidationStatus.CONSISTENT

    # Runs on the trimmed values; surrounding whitespace never counts as edits
    if similarity(a, b) > similarity_threshold:
        return ValidationStatus.CONSISTENT

    return ValidationStatus.INCONSISTENT


def select_string(
    primary: object,
    secondary: object,
    status: ValidationStatus,
    field_name: str,
) -> tuple[str, list[ValidationInconsistency]]:
    """Pick the text value to keep for ``field_name`` given its status."""
    a = _clean(primary)
    b = _clean(secondary)

    if status == ValidationStatus.CONSISTENT:
        return a or b, []

    if status == ValidationStatus.UNCERTAIN:
        selected = a or b
        if a and b:
            return selected, [
                ValidationInconsistency(
                    field=field_name,
                    code=BOTH_UNCERTAIN,
                    primary_value=a,
                    secondary_value=b,
                    selected_value=selected,
                    reason=_BOTH_UNCERTAIN_REASON,
                )
            ]
        return selected, []

    selected = a if len(a) >= len(b) else b
    return selected, [
        ValidationInconsistency(
            field=field_name,
            code=FIELD_DISAGREEMENT,
            primary_value=a,
            secondary_value=b,
            selected_value=selected,
            reason="Sources disagree, selected more detailed result",
        )
    ]


def reconcile_text(
    field_name: str,
    primary: object,
    secondary: object,
    similarity_threshold: float = 0.8,
) -> FieldOutcome:
    status = compare_strings(primary, secondary, similarity_threshold)
    value, inconsistencies = select_string(primary, secondary, status, field_name)
    return FieldOutcome(status=status, value=value, inconsistencies=inconsistencies)


# ─── Numeric Fields ──────────────────────────────────────────────────


def is_finite_number(value: object) -> bool:
    """True for real ints/floats that are not NaN or ±inf (bools excluded)."""
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def compare_numbers(
    primary: object, secondary: object, tolerance: float = 1.0
) -> ValidationStatus:
    """Judge whether two numeric readings agree, allowing ±tolerance."""
    if not is_finite_number(primary) or not is_finite_number(secondary):
        return ValidationStatus.UNCERTAIN
    if primary == secondary:
        return ValidationStatus.CONSISTENT

    # Rounding noise from OCR / model arithmetic
    if abs(primary - secondary) <= tolerance:  # type: ignore[operator]
        return ValidationStatus.CONSISTENT

    return ValidationStatus.INCONSISTENT


def pick_reasonable_number(
    primary: float,
    secondary: float,
    field_name: str,
    common_full_scores: tuple[float, ...] = DEFAULT_COMMON_FULL_SCORES,
) -> float:
    """Field-specific tie-break for two finite numbers that disagree."""
    if field_name == "score":
        return min(primary, secondary)

    if field_name == "fullScore":
        dist_primary = min(abs(primary - s) for s in common_full_scores)
        dist_secondary = min(abs(secondary - s) for s in common_full_scores)
        return primary if dist_primary <= dist_secondary else secondary

    return primary


def select_number(
    primary: object,
    secondary: object,
    status: ValidationStatus,
    field_name: str,
    common_full_scores: tuple[float, ...] = DEFAULT_COMMON_FULL_SCORES,
) -> tuple[float | None, list[ValidationInconsistency]]:
    """Pick the numeric value to keep for ``field_name`` given its status.

    Returns None as the value only when neither side is a finite number.
    """
    a = float(primary) if is_finite_number(primary) else None  # type: ignore[arg-type]
    b = float(secondary) if is_finite_number(secondary) else None  # type: ignore[arg-type]

    if status == ValidationStatus.CONSISTENT:
        return (a if a is not None else b), []

    if status == ValidationStatus.UNCERTAIN:
        selected = a if a is not None else b
        if a is not None and b is not None:
            return selected, [
                ValidationInconsistency(
                    field=field_name,
                    code=BOTH_UNCERTAIN,
                    primary_value=a,
                    secondary_value=b,
                    selected_value=selected,
                    reason=_BOTH_UNCERTAIN_REASON,
                )
            ]
        return selected, []

    if a is None or b is None:
        # INCONSISTENT implies both finite; compare_numbers is the only producer
        logger.warning(
            "Field %s marked inconsistent without two finite values (%r, %r)",
            field_name, primary, secondary,
        )
        return (a if a is not None else b), []

    selected = pick_reasonable_number(a, b, field_name, common_full_scores)
    gap = abs(a - b)
    return selected, [
        ValidationInconsistency(
            field=field_name,
            code=FIELD_DISAGREEMENT,
            primary_value=a,
            secondary_value=b,
            selected_value=selected,
            reason=f"Sources disagree (gap: {gap:g}), selected more plausible result",
        )
    ]


def reconcile_number(
    field_name: str,
    primary: object,
    secondary: object,
    tolerance: float = 1.0,
    common_full_scores: tuple[float, ...] = DEFAULT_COMMON_FULL_SCORES,
) -> FieldOutcome:
    status = compare_numbers(primary, secondary, tolerance)
    value, inconsistencies = select_number(
        primary, secondary, status, field_name, common_full_scores
    )
    return FieldOutcome(status=status, value=value, inconsistencies=inconsistencies)
