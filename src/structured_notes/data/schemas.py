"""
Immutable dataclass schemas for structured note payment calculations.

FinancialParameters is a plain value passed explicitly to every call.
There is no process-wide mutable parameter object: DEFAULT_PARAMETERS is
frozen and only ever replaced, never modified.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from typing import Any

from structured_notes.errors import InvalidParameterError

# Term sheet field names as they appear in legacy override records
_LEGACY_FIELD_NAMES: dict[str, str] = {
    "PRINCIPAL_AMOUNT": "principal_amount",
    "CONTINGENT_INTEREST_RATE": "contingent_interest_rate",
    "MONTHLY_INTEREST_RATE": "monthly_interest_rate",
    "BUFFER_THRESHOLD": "buffer_threshold",
    "BUFFER_AMOUNT": "buffer_amount",
    "CONTINGENT_INTEREST_PAYMENT": "contingent_interest_payment",
}


# =============================================================================
# Financial Parameters
# =============================================================================

@dataclass(frozen=True)
class FinancialParameters:
    """
    Term sheet parameters of a buffered contingent-coupon note. [T1]

    Construction does not validate; use
    structured_notes.validation.validate_parameters before pricing, so that
    malformed override records can still be represented and reported.

    Attributes
    ----------
    principal_amount : float
        Principal amount per note (e.g., 1000.0)
    contingent_interest_rate : float
        Contingent interest rate per annum (decimal, 0.122 = 12.20%)
    monthly_interest_rate : float
        Monthly equivalent of the contingent rate. Informational only.
    buffer_threshold : float
        Final value ratio at or above which principal + coupon is paid,
        in (0, 1] (0.90 = 90% of Initial Value)
    buffer_amount : float
        Downside cushion added back to losses, typically 1 - buffer_threshold
    contingent_interest_payment : float
        Fixed coupon paid with principal when protected (e.g., 10.1667)

    Examples
    --------
    >>> params = FinancialParameters()
    >>> params.protected_payment
    1010.1667
    >>> params.with_overrides(buffer_threshold=0.80, buffer_amount=0.20).buffer_threshold
    0.8
    """

    principal_amount: float = 1000.0
    contingent_interest_rate: float = 0.122
    monthly_interest_rate: float = 0.0101667
    buffer_threshold: float = 0.90
    buffer_amount: float = 0.10
    contingent_interest_payment: float = 10.1667

    @property
    def protected_payment(self) -> float:
        """Payment when the final value ratio is at or above the threshold."""
        return self.principal_amount + self.contingent_interest_payment

    @property
    def breakeven_return(self) -> float:
        """Lowest underlying return that still receives the protected payment."""
        return self.buffer_threshold - 1.0

    def with_overrides(self, **overrides: Any) -> "FinancialParameters":
        """Return a copy with the given fields replaced."""
        try:
            return replace(self, **overrides)
        except TypeError as e:
            raise InvalidParameterError(f"CRITICAL: Unknown parameter override: {e}") from e

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "FinancialParameters":
        """
        Build parameters from an override record.

        Keys may be snake_case field names or the legacy UPPER_SNAKE term
        sheet names (PRINCIPAL_AMOUNT, BUFFER_THRESHOLD, ...). Missing keys
        keep their defaults. Values are not coerced.

        Parameters
        ----------
        record : Mapping[str, Any]
            Override record

        Returns
        -------
        FinancialParameters
            Parameters with overrides applied

        Raises
        ------
        InvalidParameterError
            If a key does not name a parameter
        """
        valid = {f.name for f in fields(cls)}
        overrides: dict[str, Any] = {}
        unknown = []

        for key, value in record.items():
            name = _LEGACY_FIELD_NAMES.get(key, key)
            if name not in valid:
                unknown.append(key)
                continue
            overrides[name] = value

        if unknown:
            raise InvalidParameterError(
                f"CRITICAL: Unknown parameter(s): {', '.join(sorted(unknown))}. "
                f"Valid: {', '.join(sorted(valid))}"
            )

        return cls(**overrides)


#: Reference term sheet: $1,000 note, 12.20% p.a., 90% buffer threshold
DEFAULT_PARAMETERS = FinancialParameters()


# =============================================================================
# Results
# =============================================================================

@dataclass(frozen=True)
class PaymentResult:
    """
    Immutable payment at maturity calculation result.

    Attributes
    ----------
    underlying_return : float
        Underlying return (decimal)
    payment_at_maturity : float
        Amount paid to the note holder, never negative
    final_value_ratio : float
        Final Value / Initial Value (1 + underlying_return)
    protected : bool
        Whether the final value ratio met the buffer threshold
    floor_applied : bool
        Whether the downside payment was floored at zero
    advisory : str, optional
        Non-fatal diagnostic (e.g., return below -100%)
    """

    underlying_return: float
    payment_at_maturity: float
    final_value_ratio: float
    protected: bool
    floor_applied: bool = False
    advisory: str | None = None

    @property
    def has_advisory(self) -> bool:
        """Check if an advisory was raised."""
        return self.advisory is not None


@dataclass(frozen=True)
class PaymentRow:
    """
    One row of a payment table.

    Attributes
    ----------
    underlying_return : float
        Input return for this row
    return_label : str
        Formatted return (e.g., "-10.01%")
    payment_at_maturity : float, optional
        Computed payment, None if the row failed
    payment_label : str
        Formatted payment (e.g., "$1010.1667") or the error marker
    error : str, optional
        Failure message if the row could not be computed
    advisory : str, optional
        Advisory carried over from the PaymentResult
    protected : bool
        Whether the final value ratio met the buffer threshold (False on
        ERROR rows)
    """

    underlying_return: Any
    return_label: str
    payment_at_maturity: float | None
    payment_label: str
    error: str | None = None
    advisory: str | None = None
    protected: bool = False

    @property
    def is_error(self) -> bool:
        """Check if this row failed."""
        return self.error is not None

    def as_pair(self) -> tuple[str, str]:
        """(return label, payment label) as displayed."""
        return (self.return_label, self.payment_label)
