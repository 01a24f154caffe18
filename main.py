#!/usr/bin/env python3
"""
Exam Cross-Check: Entry Point
=============================

Reconciles two providers' extractions of the same exam paper and prints the
reconciled record with every disagreement.

Usage:
    python main.py                                 # Built-in sample pair
    python main.py primary.json secondary.json     # Saved provider outputs
    CROSSCHECK_LOG_LEVEL=DEBUG python main.py      # Verbose pipeline logging

Exit code is 0 when the result can be used as-is, 1 when it needs human
confirmation, 2 when the inputs or configuration could not be loaded.
"""

from __future__ import annotations

import sys

from dotenv import load_dotenv

from exam_crosscheck.config import configure_logging, load_config
from exam_crosscheck.exceptions import CrossCheckError
from exam_crosscheck.loader import load_extraction
from exam_crosscheck.models import ExtractedData, ValidatedResult, ValidationStatus
from exam_crosscheck.pipeline import CrossModelValidator


# ─── Sample Extractions (Deliberately Disagreeing) ──────────────────

SAMPLE_PRIMARY = {
    "meta": {
        "examName": "七年级数学期中考试",
        "subject": "数学",
        "score": 85,
        "fullScore": 100,
    },
    "observations": {
        "problems": [
            "【知识点】一次函数【题号】第3题【得分】5/10【错因】计算失误"
            "【证据】解题步骤中，将 2x+3=7 错误计算为 x=1【置信度】高",
            "【知识点】分式方程【题号】第5题【得分】3/8【错因】概念错误"
            "【证据】未检验增根，导致错误答案【置信度】中",
            "【知识点】二次函数【题号】第7题【得分】4/12【错因】理解错误"
            "【证据】未理解题意【置信度】中",
        ]
    },
}

SAMPLE_SECONDARY = {
    "meta": {
        "examName": "七年级 数学 期中考试",
        "subject": "数学",
        "score": 88,
        "fullScore": 100,
    },
    "observations": {
        "problems": [
            "【知识点】一次函数【题号】3【得分】5/10【错因】计算失误"
            "【证据】解题步骤错误【置信度】高",
            "【知识点】分式方程【题号】第5题【得分】4/8【错因】概念错误"
            "【证据】未检验增根【置信度】高",
        ]
    },
}


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72

_STATUS_COLORS = {
    ValidationStatus.CONSISTENT: _GREEN,
    ValidationStatus.UNCERTAIN: _YELLOW,
    ValidationStatus.INCONSISTENT: _RED,
}


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _status(status: ValidationStatus) -> str:
    return f"{_STATUS_COLORS[status]}{status.value}{_RESET}"


def _print_fields(result: ValidatedResult) -> None:
    """Print reconciled scalar fields with their status."""
    st = result.validation_status
    print(f"  Exam:        {result.exam_name or '-'}  {_DIM}[{_RESET}{_status(st.exam_name)}{_DIM}]{_RESET}")
    print(f"  Subject:     {result.subject or '-'}  {_DIM}[{_RESET}{_status(st.subject)}{_DIM}]{_RESET}")
    print(f"  Score:       {_fmt(result.score)}  {_DIM}[{_RESET}{_status(st.score)}{_DIM}]{_RESET}")
    print(f"  Full score:  {_fmt(result.full_score)}  {_DIM}[{_RESET}{_status(st.full_score)}{_DIM}]{_RESET}")


def _print_problems(result: ValidatedResult) -> None:
    """Print the reconciled question list (compact format)."""
    print(f"  Questions ({len(result.problems)})  {_DIM}[{_RESET}{_status(result.validation_status.problems)}{_DIM}]{_RESET}")
    for i, p in enumerate(result.problems, 1):
        print(
            f"    {i}. {p.question_no or '?'}  score={p.score or '-'}  "
            f"{_DIM}{p.knowledge} / {p.error_type} / {p.confidence.value}{_RESET}"
        )


def _print_ledger(result: ValidatedResult) -> None:
    """Print every ledger entry."""
    ledger = result.validation_details.inconsistencies
    if not ledger:
        return
    print(f"\n  {_YELLOW}{_BOLD}DISAGREEMENTS ({len(ledger)}){_RESET}")
    for inc in ledger:
        print(f"    {_YELLOW}[{inc.code}]{_RESET} {inc.field}")
        print(f"    {inc.reason}")
        print(f"      {_DIM}selected: {_short(inc.selected_value)}{_RESET}")
        print()


def _fmt(value: float | None) -> str:
    return "-" if value is None else f"{value:g}"


def _short(value: object) -> str:
    if hasattr(value, "score") and hasattr(value, "question_no"):
        return f"{value.question_no} {value.score} ({value.confidence.value})"  # type: ignore[attr-defined]
    return repr(value)


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(result: ValidatedResult) -> int:
    """Pretty-print the reconciled result with ANSI color codes.

    Returns:
        0 if no confirmation is needed, 1 otherwise.
    """
    details = result.validation_details
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  EXAM CROSS-CHECK REPORT{_RESET}")
    print(f"{'=' * _WIDTH}")
    print(f"  Providers:   {details.primary_provider} (primary) + {details.secondary_provider}")
    print(f"{'─' * _WIDTH}")

    _print_fields(result)
    print(f"{'─' * _WIDTH}")
    _print_problems(result)
    _print_ledger(result)

    print(f"{'=' * _WIDTH}")
    if details.needs_user_confirmation:
        print(f"  {_RED}{_BOLD}NEEDS USER CONFIRMATION  --  {len(details.inconsistencies)} disagreement(s){_RESET}")
    else:
        print(f"  {_GREEN}{_BOLD}PROVIDERS AGREE{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 1 if details.needs_user_confirmation else 0


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Reconcile the sample pair (or two JSON files) and print the report."""
    args = sys.argv[1:] if argv is None else argv
    load_dotenv()

    try:
        config = load_config()
        if len(args) == 2:
            primary = load_extraction(args[0])
            secondary = load_extraction(args[1])
        elif not args:
            primary = ExtractedData.model_validate(SAMPLE_PRIMARY)
            secondary = ExtractedData.model_validate(SAMPLE_SECONDARY)
        else:
            print("Usage: python main.py [primary.json secondary.json]", file=sys.stderr)
            return 2
    except CrossCheckError as e:
        print(f"{_RED}[{e.code}]{_RESET} {e}", file=sys.stderr)
        return 2

    configure_logging(config)
    validator = CrossModelValidator(config)
    result = validator.validate(primary, secondary)
    return print_report(result)


if __name__ == "__main__":
    sys.exit(main())
