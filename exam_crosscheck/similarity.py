"""
String similarity for text fields reported by two providers.

Exam names come back from vision models with stray spaces, full-width
punctuation and the odd misread character ("七年级数学期中考试" vs
"七年级 数学 期中考试").  Two tools handle that:

  1. normalize_text(): drop whitespace and punctuation, lowercase
  2. similarity():     1 - Levenshtein distance / longer length

Distance is computed over Unicode code points with unit costs.  Grapheme
clusters are deliberately NOT merged so results stay reproducible against
fixed fixtures.
"""

from __future__ import annotations

import unicodedata


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert / delete / substitute, cost 1 each).

    Full O(len(a)·len(b)) dynamic-programming table.
    """
    rows = len(a) + 1
    cols = len(b) + 1
    table = [[0] * cols for _ in range(rows)]

    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,  # deletion
                table[i][j - 1] + 1,  # insertion
                table[i - 1][j - 1] + cost,  # substitution
            )

    return table[rows - 1][cols - 1]


def similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]; 1.0 means identical.

    Both empty → 1.0.  Exactly one empty → 0.0.
    """
    if not a:
        return 1.0 if not b else 0.0
    if not b:
        return 0.0

    longest = max(len(a), len(b))
    return 1 - levenshtein_distance(a, b) / longest


def normalize_text(value: str) -> str:
    """Remove every whitespace and Unicode punctuation character, then lowercase."""
    return "".join(
        ch
        for ch in value
        if not ch.isspace() and not unicodedata.category(ch).startswith("P")
    ).lower()
