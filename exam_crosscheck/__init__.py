"""
Exam Cross-Check: reconciles two vision models' readings of one exam paper.

Architecture: Dual extraction (two providers) → Scalar + per-question reconciliation → Ledger
Philosophy:  Trust neither model alone. Surface every disagreement as data.
"""

__version__ = "1.0.0"
