"""
Question matcher: pairs up findings from the two providers.

Providers label questions inconsistently ("第3题", "3", "Q3 (b)"), so question
identity is the FIRST run of decimal digits in ``question_no``.  A label with
no digits has no identity and never matches anything, not even another
digit-less label.

The algorithm is greedy and order-preserving:
  1. Walk the primary findings in order.
  2. For each, take the first unused secondary finding with the same identity.
  3. Unpaired primary findings are emitted alone (UNCERTAIN).
  4. Leftover secondary findings follow, alone, in their original order.

Output order is therefore: primary order, then leftover-secondary order.
Repeated or out-of-sequence question numbers are paired first-come-first-served.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .models import ProblemInfo, ValidationStatus

logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"\d+", re.ASCII)


@dataclass(frozen=True)
class ProblemMatch:
    """One output slot: a matched pair, or a single-source finding."""

    primary: ProblemInfo  # For a secondary-only slot this holds the secondary finding
    secondary: Optional[ProblemInfo]
    status: ValidationStatus


def extract_question_number(question_no: str) -> str:
    """'第12题' → '12'; no digits → ''."""
    match = _DIGITS_RE.search(question_no or "")
    return match.group(0) if match else ""


def is_same_question(question_a: str, question_b: str) -> bool:
    identity = extract_question_number(question_a)
    return identity != "" and identity == extract_question_number(question_b)


def compare_problem(primary: ProblemInfo, secondary: ProblemInfo) -> ValidationStatus:
    """Classify a matched pair by identity and raw score text."""
    if not is_same_question(primary.question_no, secondary.question_no):
        logger.warning(
            "Matched pair with differing question identity: %r vs %r",
            primary.question_no, secondary.question_no,
        )
        return ValidationStatus.UNCERTAIN
    if primary.score == secondary.score:
        return ValidationStatus.CONSISTENT
    return ValidationStatus.INCONSISTENT


def match_problems(
    primary: list[ProblemInfo], secondary: list[ProblemInfo]
) -> list[ProblemMatch]:
    """Align two ordered finding lists by question identity."""
    matched: list[ProblemMatch] = []
    used: set[int] = set()
    secondary_ids = [extract_question_number(p.question_no) for p in secondary]

    for p1 in primary:
        identity = extract_question_number(p1.question_no)
        idx = _first_unused(identity, secondary_ids, used)

        if idx is None:
            matched.append(ProblemMatch(p1, None, ValidationStatus.UNCERTAIN))
            continue

        used.add(idx)
        p2 = secondary[idx]
        matched.append(ProblemMatch(p1, p2, compare_problem(p1, p2)))

    for i, p2 in enumerate(secondary):
        if i not in used:
            matched.append(ProblemMatch(p2, None, ValidationStatus.UNCERTAIN))

    return matched


def _first_unused(identity: str, candidates: list[str], used: set[int]) -> int | None:
    if not identity:
        return None
    for i, candidate in enumerate(candidates):
        if i not in used and candidate == identity:
            return i
    return None
