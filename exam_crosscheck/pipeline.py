"""
Cross-model validation pipeline. Reconciles two providers' readings of one exam.

Flow:
  ┌────────────┐       ┌────────────┐
  │  Primary   │       │ Secondary  │   ← Two independent extractions
  │ extraction │       │ extraction │
  └─────┬──────┘       └──────┬─────┘
        │                     │
        ├──── meta fields ────┤
        │                     │
  ┌─────▼─────────────────────▼─────┐
  │        Scalar reconciler        │   ← examName, subject, score, fullScore
  └────────────────┬────────────────┘
                   │
  ┌────────────────▼────────────────┐
  │ Parse → Match → Reconcile Qs    │   ← per-question findings
  └────────────────┬────────────────┘
                   │
  ┌────────────────▼────────────────┐
  │     ValidatedResult + ledger    │   ← needs_user_confirmation gate
  └─────────────────────────────────┘

Design principles:
  - Pure: no I/O, no environment access, no shared mutable state.
  - Never raises on sparse or malformed extractions; every gap has a fallback.
  - Disagreements are DATA (ledger entries), not exceptions.
  - The validator holds only immutable configuration, so one instance can be
    shared freely across threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Union

from .config import ValidatorConfig
from .findings import reconcile_problems
from .models import (
    CONFIRMATION_CODES,
    ExtractedData,
    FieldStatuses,
    ValidatedResult,
    ValidationDetails,
    ValidationInconsistency,
)
from .scalars import reconcile_number, reconcile_text

logger = logging.getLogger(__name__)

ExtractionInput = Union[ExtractedData, Mapping[str, Any]]


class CrossModelValidator:
    """Reconciles two providers' extractions of the same exam.

    Usage:
        validator = CrossModelValidator()
        result = validator.validate(primary, secondary, "doubao", "aliyun")
        if result.validation_details.needs_user_confirmation:
            # pause the workflow for human review
            for inc in result.validation_details.inconsistencies:
                print(inc.field, inc.reason)
    """

    def __init__(self, config: ValidatorConfig | None = None):
        self.config = config or ValidatorConfig()

    def validate(
        self,
        primary: ExtractionInput,
        secondary: ExtractionInput,
        primary_provider: str | None = None,
        secondary_provider: str | None = None,
    ) -> ValidatedResult:
        """Reconcile two extractions into one record plus a disagreement ledger.

        Args:
            primary: Extraction from the primary provider (model or raw mapping).
            secondary: Extraction from the secondary provider.
            primary_provider: Identifier of the primary provider.
                Defaults to ``config.primary_provider`` when None.
            secondary_provider: Identifier of the secondary provider.
                Defaults to ``config.secondary_provider`` when None.

        Returns:
            ValidatedResult with reconciled values, per-field statuses and
            the inconsistency ledger.
        """
        first = _as_extraction(primary)
        second = _as_extraction(secondary)
        cfg = self.config

        # ── Step 1: Scalar fields ───────────────────────────────────
        logger.debug("Reconciling scalar fields...")
        exam_name = reconcile_text(
            "examName", first.meta.exam_name, second.meta.exam_name,
            cfg.similarity_threshold,
        )
        subject = reconcile_text(
            "subject", first.meta.subject, second.meta.subject,
            cfg.similarity_threshold,
        )
        score = reconcile_number(
            "score", first.meta.score, second.meta.score,
            cfg.number_tolerance, cfg.common_full_scores,
        )
        full_score = reconcile_number(
            "fullScore", first.meta.full_score, second.meta.full_score,
            cfg.number_tolerance, cfg.common_full_scores,
        )

        # ── Step 2: Question findings ───────────────────────────────
        logger.debug(
            "Reconciling question findings (%d primary, %d secondary)...",
            len(first.observations.problems), len(second.observations.problems),
        )
        problems = reconcile_problems(
            first.observations.problems, second.observations.problems
        )

        # ── Step 3: Assemble ledger and confirmation gate ───────────
        inconsistencies: list[ValidationInconsistency] = [
            *exam_name.inconsistencies,
            *subject.inconsistencies,
            *score.inconsistencies,
            *full_score.inconsistencies,
            *problems.inconsistencies,
        ]
        needs_confirmation = any(
            inc.code in CONFIRMATION_CODES for inc in inconsistencies
        )

        result = ValidatedResult(
            exam_name=exam_name.value,
            subject=subject.value,
            score=score.value,
            full_score=full_score.value,
            problems=problems.problems,
            validation_status=FieldStatuses(
                exam_name=exam_name.status,
                subject=subject.status,
                score=score.status,
                full_score=full_score.status,
                problems=problems.status,
            ),
            validation_details=ValidationDetails(
                primary_provider=(
                    primary_provider
                    if primary_provider is not None
                    else cfg.primary_provider
                ),
                secondary_provider=(
                    secondary_provider
                    if secondary_provider is not None
                    else cfg.secondary_provider
                ),
                inconsistencies=inconsistencies,
                needs_user_confirmation=needs_confirmation,
            ),
        )

        logger.info(
            "Cross-check %s + %s: examName=%s subject=%s score=%s fullScore=%s "
            "problems=%s, %d inconsistenc(ies), confirmation=%s",
            result.validation_details.primary_provider,
            result.validation_details.secondary_provider,
            exam_name.status.value, subject.status.value, score.status.value,
            full_score.status.value, problems.status.value,
            len(inconsistencies), needs_confirmation,
        )
        return result


def _as_extraction(value: ExtractionInput) -> ExtractedData:
    if isinstance(value, ExtractedData):
        return value
    return ExtractedData.model_validate(dict(value or {}))
