"""
Per-question parser for the tagged finding lines providers emit.

A provider reports each question as one line of bracketed tags, in any order:

    【知识点】一次函数【题号】第3题【得分】5/10【错因】计算失误【证据】...【置信度】高

Parsing is a single left-to-right scan: locate every recognised tag, and take
each tag's value as the text up to the next recognised tag (or end of line).
Brackets that are not one of the six tags stay inside the value.

This parser never raises.  A line with no tags yields an all-empty finding
with medium confidence.
"""

from __future__ import annotations

import re

from .models import ConfidenceLevel, ProblemInfo

# Tag → ProblemInfo attribute
TAG_FIELDS: dict[str, str] = {
    "【知识点】": "knowledge",
    "【题号】": "question_no",
    "【得分】": "score",
    "【错因】": "error_type",
    "【证据】": "evidence",
    "【置信度】": "confidence",
}

_TAG_RE = re.compile("|".join(re.escape(tag) for tag in TAG_FIELDS))


def parse_problem(line: str) -> ProblemInfo:
    """Turn one tagged line into a ProblemInfo."""
    values = extract_tagged_values(line or "")
    confidence_text = values.pop("confidence", "")
    return ProblemInfo(**values, confidence=parse_confidence(confidence_text))


def extract_tagged_values(line: str) -> dict[str, str]:
    """Map every ProblemInfo attribute to its tag value ("" when the tag is absent).

    When a tag appears twice, the first occurrence wins.
    """
    values = {name: "" for name in TAG_FIELDS.values()}
    seen: set[str] = set()

    matches = list(_TAG_RE.finditer(line))
    for i, match in enumerate(matches):
        tag = match.group(0)
        if tag in seen:
            continue
        seen.add(tag)
        end = matches[i + 1].start() if i + 1 < len(matches) else len(line)
        values[TAG_FIELDS[tag]] = line[match.end():end].strip()

    return values


def parse_confidence(text: str) -> ConfidenceLevel:
    """Classify free-text confidence: 高/high → HIGH, 低/low → LOW, else MEDIUM."""
    lowered = (text or "").lower()
    if "高" in lowered or "high" in lowered:
        return ConfidenceLevel.HIGH
    if "低" in lowered or "low" in lowered:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.MEDIUM
