"""
Data model and parameter loading for structured notes.
"""

from structured_notes.data.loader import load_parameters, resolve_parameters
from structured_notes.data.schemas import (
    DEFAULT_PARAMETERS,
    FinancialParameters,
    PaymentResult,
    PaymentRow,
)

__all__ = [
    "DEFAULT_PARAMETERS",
    "FinancialParameters",
    "PaymentResult",
    "PaymentRow",
    "load_parameters",
    "resolve_parameters",
]
