"""
Payment at maturity for a buffered contingent-coupon structured note.

[T1] Final Value Ratio = Final Value / Initial Value = 1 + Underlying Return

Payoff formula:
- If final_value_ratio >= buffer_threshold:
    principal + contingent_interest_payment
- If final_value_ratio < buffer_threshold:
    max(0, principal + principal * (underlying_return + buffer_amount))

[T1] The comparison is inclusive: a note finishing exactly at the buffer
threshold receives principal + coupon. With the reference term sheet this
makes the payoff discontinuous at -10%: $1010.1667 at -10.00% and $999.90
at -10.01%.
"""

import logging
import math
import numbers
from typing import Any

import numpy as np

from structured_notes.config.settings import SETTINGS
from structured_notes.data.schemas import (
    DEFAULT_PARAMETERS,
    FinancialParameters,
    PaymentResult,
)
from structured_notes.errors import InvalidInputError, InvalidParameterError

logger = logging.getLogger(__name__)


def _check_underlying_return(underlying_return: Any) -> float:
    """Return the input as float, raising InvalidInputError if not a real number."""
    # bool is an int subclass but never a meaningful return
    if isinstance(underlying_return, (bool, np.bool_)) or not isinstance(
        underlying_return, numbers.Real
    ):
        raise InvalidInputError(
            f"CRITICAL: Underlying return must be a number, "
            f"got {type(underlying_return).__name__}"
        )

    value = float(underlying_return)
    if math.isnan(value):
        raise InvalidInputError("CRITICAL: Underlying return must be a number, got NaN")
    return value


def _total_loss_advisory(underlying_return: float) -> str | None:
    """Advisory text for returns below -100%, else None."""
    if underlying_return < SETTINGS.validation.total_loss_return:
        return (
            f"Underlying return {underlying_return * 100:.2f}% is below -100%; "
            f"this represents a total loss scenario"
        )
    return None


class NotePayoff:
    """
    Buffered contingent-coupon note payoff.

    [T1] At or above the buffer threshold the holder receives principal plus
    the contingent coupon, however far above the threshold the underlying
    finishes. Below it, the holder participates one-for-one in losses net of
    the buffer amount, and the payment never goes below zero.

    Parameters
    ----------
    params : FinancialParameters
        Term sheet parameters. Not re-validated here.

    Examples
    --------
    >>> payoff = NotePayoff(DEFAULT_PARAMETERS)
    >>> payoff.calculate(0.60).payment_at_maturity
    1010.1667
    >>> payoff.calculate(-0.10).protected
    True
    >>> round(payoff.calculate(-0.20).payment_at_maturity, 4)
    900.0

    Notes
    -----
    Unlike a RILA buffer the downside formula does not cap the loss at zero
    after adding the buffer back: at -10.01% the holder receives $999.90,
    less than principal, while at -10.00% they receive principal + coupon.
    """

    def __init__(self, params: FinancialParameters = DEFAULT_PARAMETERS):
        self.params = params

    @property
    def breakeven_return(self) -> float:
        """Lowest underlying return paid principal + coupon."""
        return self.params.buffer_threshold - 1.0

    def calculate(self, underlying_return: Any) -> PaymentResult:
        """
        Calculate payment at maturity.

        Parameters
        ----------
        underlying_return : float
            Underlying return (decimal, e.g., 0.60 = 60%)

        Returns
        -------
        PaymentResult
            Payment with branch, floor and advisory flags

        Raises
        ------
        InvalidInputError
            If underlying_return is not a real number
        InvalidParameterError
            If the parameters produce a non-finite payment
        """
        underlying_return = _check_underlying_return(underlying_return)
        params = self.params

        advisory = _total_loss_advisory(underlying_return)
        if advisory is not None:
            logger.warning(advisory)

        final_value_ratio = 1 + underlying_return
        floor_applied = False

        if final_value_ratio >= params.buffer_threshold:
            # Flat protected payoff
            payment = params.principal_amount + params.contingent_interest_payment
            protected = True
        else:
            # Downside participation net of buffer
            adjusted_return = underlying_return + params.buffer_amount
            payment = params.principal_amount + params.principal_amount * adjusted_return
            protected = False
            if payment < 0:
                payment = 0.0
                floor_applied = True

        if not math.isfinite(payment):
            raise InvalidParameterError(
                f"CRITICAL: Payment at maturity is {payment}; "
                f"term sheet parameters must be finite numbers"
            )

        return PaymentResult(
            underlying_return=underlying_return,
            payment_at_maturity=payment,
            final_value_ratio=final_value_ratio,
            protected=protected,
            floor_applied=floor_applied,
            advisory=advisory,
        )

    def calculate_vectorized(self, underlying_returns: np.ndarray) -> np.ndarray:
        """
        Vectorized payment calculation.

        Must produce identical results to calling calculate() in a loop.
        No advisories are logged.

        Parameters
        ----------
        underlying_returns : np.ndarray
            Array of underlying returns (decimal)

        Returns
        -------
        np.ndarray
            Array of payments (same shape as input)

        Raises
        ------
        InvalidInputError
            If the array is not numeric or contains NaN
        InvalidParameterError
            If the parameters produce a non-finite payment
        """
        returns = np.asarray(underlying_returns)
        if returns.dtype.kind not in "iuf":
            raise InvalidInputError(
                f"CRITICAL: Underlying returns must be numeric, got dtype {returns.dtype}"
            )
        returns = returns.astype(float)
        if np.isnan(returns).any():
            raise InvalidInputError("CRITICAL: Underlying returns must not contain NaN")

        params = self.params
        final_value_ratios = 1 + returns

        downside = params.principal_amount + params.principal_amount * (
            returns + params.buffer_amount
        )
        downside = np.maximum(downside, 0.0)

        payments = np.where(
            final_value_ratios >= params.buffer_threshold,
            params.principal_amount + params.contingent_interest_payment,
            downside,
        )
        if not np.isfinite(payments).all():
            raise InvalidParameterError(
                "CRITICAL: Payments at maturity are not finite; "
                "term sheet parameters must be finite numbers"
            )
        return payments


def calculate_payment(
    underlying_return: Any,
    params: FinancialParameters = DEFAULT_PARAMETERS,
) -> PaymentResult:
    """
    Calculate payment at maturity as a structured result.

    Parameters
    ----------
    underlying_return : float
        Underlying return (decimal)
    params : FinancialParameters
        Term sheet parameters

    Returns
    -------
    PaymentResult
        Payment with branch, floor and advisory flags
    """
    return NotePayoff(params).calculate(underlying_return)


def compute_payment_at_maturity(
    underlying_return: Any,
    params: FinancialParameters = DEFAULT_PARAMETERS,
) -> float:
    """
    Compute payment at maturity for a structured note.

    Parameters
    ----------
    underlying_return : float
        Underlying return (decimal, e.g., -0.20 = -20%)
    params : FinancialParameters
        Term sheet parameters

    Returns
    -------
    float
        Payment at maturity

    Raises
    ------
    InvalidInputError
        If underlying_return is not a real number

    Examples
    --------
    >>> compute_payment_at_maturity(-0.10)
    1010.1667
    >>> round(compute_payment_at_maturity(-1.0), 4)
    100.0
    """
    return calculate_payment(underlying_return, params).payment_at_maturity
