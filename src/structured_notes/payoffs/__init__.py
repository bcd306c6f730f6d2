"""
Structured note payoffs.

- NotePayoff: Buffered contingent-coupon payment at maturity
"""

from structured_notes.payoffs.note import (
    NotePayoff,
    calculate_payment,
    compute_payment_at_maturity,
)

__all__ = [
    "NotePayoff",
    "calculate_payment",
    "compute_payment_at_maturity",
]
