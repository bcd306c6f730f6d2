"""
structured-notes: Payment at maturity for buffered contingent-coupon notes.

Quick Start
-----------
>>> from structured_notes import FinancialParameters, compute_payment_at_maturity
>>> compute_payment_at_maturity(-0.10, FinancialParameters())
1010.1667
>>> from structured_notes import generate_payment_table
>>> rows = generate_payment_table()

Version: 0.1.0
"""

__version__ = "0.1.0"

# =============================================================================
# Data Model
# =============================================================================
from structured_notes.data.schemas import (
    DEFAULT_PARAMETERS,
    FinancialParameters,
    PaymentResult,
    PaymentRow,
)
from structured_notes.data.loader import load_parameters, resolve_parameters

# =============================================================================
# Errors
# =============================================================================
from structured_notes.errors import (
    InvalidInputError,
    InvalidParameterError,
    ParameterLoadError,
)

# =============================================================================
# Payment Calculator
# =============================================================================
from structured_notes.payoffs.note import (
    NotePayoff,
    calculate_payment,
    compute_payment_at_maturity,
)

# =============================================================================
# Validation
# =============================================================================
from structured_notes.validation.gates import (
    ValidationReport,
    run_parameter_gates,
    validate_parameters,
)

# =============================================================================
# Table Generation and Reporting
# =============================================================================
from structured_notes.table import (
    DEFAULT_SAMPLE_RETURNS,
    TableSummary,
    generate_payment_table,
    rows_as_pairs,
    summarize_table,
    table_to_dataframe,
)
from structured_notes.reporting import (
    PaymentTableReporter,
    ReportConfig,
    display_payment_table,
)

# =============================================================================
# Configuration
# =============================================================================
from structured_notes.config.settings import SETTINGS

__all__ = [
    # Version
    "__version__",
    # Data model
    "DEFAULT_PARAMETERS",
    "FinancialParameters",
    "PaymentResult",
    "PaymentRow",
    "load_parameters",
    "resolve_parameters",
    # Errors
    "InvalidInputError",
    "InvalidParameterError",
    "ParameterLoadError",
    # Calculator
    "NotePayoff",
    "calculate_payment",
    "compute_payment_at_maturity",
    # Validation
    "ValidationReport",
    "run_parameter_gates",
    "validate_parameters",
    # Table
    "DEFAULT_SAMPLE_RETURNS",
    "TableSummary",
    "generate_payment_table",
    "rows_as_pairs",
    "summarize_table",
    "table_to_dataframe",
    # Reporting
    "PaymentTableReporter",
    "ReportConfig",
    "display_payment_table",
    # Config
    "SETTINGS",
]
