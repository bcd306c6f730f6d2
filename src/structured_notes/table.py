"""
Payment table generator.

Tabulates payment at maturity over an ordered list of sample returns.

Design Principles:
- **Order preserved**: row i always corresponds to returns[i]
- **Row isolation**: a failure computing one row becomes an ERROR row and
  never aborts the remaining rows
- **Validate once**: the parameter set is validated up front, not per row
- **Pluggable calculator**: any callable (return, params) -> PaymentResult
  or float can be tabulated
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any

import pandas as pd

from structured_notes.config.settings import SETTINGS
from structured_notes.data.schemas import (
    DEFAULT_PARAMETERS,
    FinancialParameters,
    PaymentResult,
    PaymentRow,
)
from structured_notes.payoffs.note import calculate_payment
from structured_notes.validation.gates import validate_parameters

logger = logging.getLogger(__name__)

PaymentCalculator = Callable[[Any, FinancialParameters], PaymentResult | float]

#: Default sample returns, in display order
DEFAULT_SAMPLE_RETURNS: tuple[float, ...] = SETTINGS.note.sample_returns


# =============================================================================
# Labels
# =============================================================================

def format_return_label(underlying_return: Any, decimals: int | None = None) -> str:
    """
    Format an underlying return as a percentage label.

    Non-numeric inputs (which can only appear on ERROR rows) are shown
    as-is.

    Examples
    --------
    >>> format_return_label(-0.1001)
    '-10.01%'
    """
    if decimals is None:
        decimals = SETTINGS.note.return_decimals
    try:
        return f"{float(underlying_return) * 100:.{decimals}f}%"
    except (TypeError, ValueError):
        return str(underlying_return)


def format_payment_label(payment: float, decimals: int | None = None) -> str:
    """
    Format a payment as a dollar label.

    Examples
    --------
    >>> format_payment_label(1010.1667)
    '$1010.1667'
    """
    if decimals is None:
        decimals = SETTINGS.note.payment_decimals
    return f"${payment:.{decimals}f}"


# =============================================================================
# Row Construction
# =============================================================================

def _error_row(underlying_return: Any, message: str) -> PaymentRow:
    """Create the ERROR marker row for a failed return."""
    marker = SETTINGS.note.error_marker
    return PaymentRow(
        underlying_return=underlying_return,
        return_label=format_return_label(underlying_return),
        payment_at_maturity=None,
        payment_label=marker,
        error=message,
    )


def build_row(
    underlying_return: Any,
    params: FinancialParameters,
    calculator: PaymentCalculator = calculate_payment,
) -> PaymentRow:
    """
    Compute a single table row, converting any failure into an ERROR row.

    Parameters
    ----------
    underlying_return : float
        Sample return
    params : FinancialParameters
        Term sheet parameters
    calculator : callable
        (return, params) -> PaymentResult or float

    Returns
    -------
    PaymentRow
        Computed row, or ERROR row if the calculator raised
    """
    try:
        result = calculator(underlying_return, params)
        if isinstance(result, PaymentResult):
            payment = result.payment_at_maturity
            advisory = result.advisory
            protected = result.protected
        else:
            # Plain float calculators carry no branch flag; classify by the threshold
            payment = float(result)
            advisory = None
            protected = 1 + float(underlying_return) >= params.buffer_threshold
    except Exception as e:
        logger.warning(
            f"Error calculating payment for return {underlying_return!r}: {e}"
        )
        return _error_row(underlying_return, str(e))

    return PaymentRow(
        underlying_return=underlying_return,
        return_label=format_return_label(underlying_return),
        payment_at_maturity=payment,
        payment_label=format_payment_label(payment),
        advisory=advisory,
        protected=protected,
    )


# =============================================================================
# Table Generation
# =============================================================================

def generate_payment_table(
    returns: Sequence[Any] | None = None,
    params: FinancialParameters = DEFAULT_PARAMETERS,
    calculator: PaymentCalculator = calculate_payment,
    parallel: bool = False,
    n_workers: int | None = None,
) -> list[PaymentRow]:
    """
    Generate the payment table for a sequence of sample returns.

    Parameters
    ----------
    returns : Sequence, optional
        Sample returns in display order (default DEFAULT_SAMPLE_RETURNS)
    params : FinancialParameters
        Term sheet parameters, validated once before any row is computed
    calculator : callable
        (return, params) -> PaymentResult or float
    parallel : bool
        Compute rows in a process pool. calculator must be picklable.
    n_workers : int, optional
        Number of worker processes (None = auto)

    Returns
    -------
    list[PaymentRow]
        One row per input return, in input order

    Raises
    ------
    InvalidParameterError
        If params fails validation (and halting is enabled in settings)

    Examples
    --------
    >>> rows = generate_payment_table()
    >>> rows[6].as_pair()
    ('-10.00%', '$1010.1667')
    """
    if returns is None:
        returns = DEFAULT_SAMPLE_RETURNS

    if SETTINGS.validation.halt_on_invalid_parameters:
        validate_parameters(params)

    logger.info(f"Generating payment table for {len(returns)} returns")

    if parallel and len(returns) > 1:
        rows = _generate_parallel(returns, params, calculator, n_workers)
    else:
        rows = [build_row(r, params, calculator) for r in returns]

    n_errors = sum(1 for row in rows if row.is_error)
    if n_errors:
        logger.warning(f"{n_errors} of {len(rows)} rows failed")

    return rows


def _generate_parallel(
    returns: Sequence[Any],
    params: FinancialParameters,
    calculator: PaymentCalculator,
    n_workers: int | None,
) -> list[PaymentRow]:
    """Compute rows in a ProcessPoolExecutor, placing results back by index."""
    rows: list[PaymentRow | None] = [None] * len(returns)

    with ProcessPoolExecutor(max_workers=n_workers) as executor:
        future_to_index = {
            executor.submit(build_row, r, params, calculator): i
            for i, r in enumerate(returns)
        }

        for future in as_completed(future_to_index):
            i = future_to_index[future]
            try:
                rows[i] = future.result()
            except Exception as e:
                logger.warning(f"  FAILED: return {returns[i]!r}: {e}")
                rows[i] = _error_row(returns[i], str(e))

    return rows  # type: ignore[return-value]


# =============================================================================
# Summaries and Conversions
# =============================================================================

@dataclass(frozen=True)
class TableSummary:
    """
    Aggregate view of a payment table.

    Attributes
    ----------
    n_rows : int
        Total rows
    n_protected : int
        Rows paid principal + coupon
    n_errors : int
        Rows that failed
    n_advisories : int
        Rows carrying an advisory
    """

    n_rows: int
    n_protected: int
    n_errors: int
    n_advisories: int

    @property
    def n_downside(self) -> int:
        """Rows in the downside participation region."""
        return self.n_rows - self.n_protected - self.n_errors


def summarize_table(
    rows: Sequence[PaymentRow],
    params: FinancialParameters = DEFAULT_PARAMETERS,
) -> TableSummary:
    """
    Summarize a payment table.

    A row counts as protected when the calculator took the flat
    principal + coupon branch for it (PaymentRow.protected).
    """
    return TableSummary(
        n_rows=len(rows),
        n_protected=sum(1 for row in rows if row.protected and not row.is_error),
        n_errors=sum(1 for row in rows if row.is_error),
        n_advisories=sum(1 for row in rows if row.advisory is not None),
    )


def rows_as_pairs(rows: Sequence[PaymentRow]) -> list[tuple[str, str]]:
    """Return (return label, payment label) pairs in table order."""
    return [row.as_pair() for row in rows]


def table_to_dataframe(rows: Sequence[PaymentRow]) -> pd.DataFrame:
    """
    Convert a payment table to a DataFrame.

    Columns: underlying_return, return_label, payment_at_maturity,
    payment_label, protected, error, advisory. ERROR rows have NaN payment.
    """
    columns = [
        "underlying_return",
        "return_label",
        "payment_at_maturity",
        "payment_label",
        "protected",
        "error",
        "advisory",
    ]
    return pd.DataFrame(
        [
            {
                "underlying_return": row.underlying_return,
                "return_label": row.return_label,
                "payment_at_maturity": row.payment_at_maturity,
                "payment_label": row.payment_label,
                "protected": row.protected,
                "error": row.error,
                "advisory": row.advisory,
            }
            for row in rows
        ],
        columns=columns,
    )
