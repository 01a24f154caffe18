"""
Finding reconciler: turns matched question slots into the final question list.

Per slot:
  - CONSISTENT   → keep the primary finding as-is
  - INCONSISTENT → keep whichever finding reports higher confidence
                   (ties favour primary) and record a ledger entry
  - UNCERTAIN    → only one provider saw the question; keep it, no ledger entry

A finding is always taken whole.  Knowledge from one provider is never
spliced with evidence from the other.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .matching import match_problems
from .models import (
    CONFIDENCE_RANK,
    QUESTION_DISAGREEMENT,
    ProblemInfo,
    ValidationInconsistency,
    ValidationStatus,
)
from .problem_parser import parse_problem


@dataclass
class ProblemsOutcome:
    """Reconciled question list with its aggregate status."""

    status: ValidationStatus
    problems: list[ProblemInfo] = field(default_factory=list)
    inconsistencies: list[ValidationInconsistency] = field(default_factory=list)


def select_problem(primary: ProblemInfo, secondary: ProblemInfo | None) -> ProblemInfo:
    """Higher confidence wins; equal confidence keeps the primary finding."""
    if secondary is None:
        return primary
    if CONFIDENCE_RANK[primary.confidence] >= CONFIDENCE_RANK[secondary.confidence]:
        return primary
    return secondary


def reconcile_problems(
    primary_lines: list[str], secondary_lines: list[str]
) -> ProblemsOutcome:
    """Parse, match and reconcile both providers' question findings."""
    parsed_primary = [parse_problem(line) for line in primary_lines]
    parsed_secondary = [parse_problem(line) for line in secondary_lines]

    problems: list[ProblemInfo] = []
    inconsistencies: list[ValidationInconsistency] = []
    has_inconsistency = False
    has_uncertain = False

    for match in match_problems(parsed_primary, parsed_secondary):
        if match.status == ValidationStatus.CONSISTENT:
            problems.append(match.primary.model_copy())

        elif match.status == ValidationStatus.INCONSISTENT:
            has_inconsistency = True
            selected = select_problem(match.primary, match.secondary)
            problems.append(selected.model_copy())
            question_no = match.primary.question_no
            inconsistencies.append(
                ValidationInconsistency(
                    field=f"problem_{question_no}",
                    code=QUESTION_DISAGREEMENT,
                    primary_value=match.primary,
                    secondary_value=match.secondary,
                    selected_value=selected,
                    reason=(
                        f"Question {question_no} findings disagree, "
                        f"selected higher-confidence result"
                    ),
                )
            )

        else:
            has_uncertain = True
            problems.append(match.primary.model_copy())

    if has_inconsistency:
        status = ValidationStatus.INCONSISTENT
    elif has_uncertain:
        status = ValidationStatus.UNCERTAIN
    else:
        status = ValidationStatus.CONSISTENT

    return ProblemsOutcome(
        status=status, problems=problems, inconsistencies=inconsistencies
    )
