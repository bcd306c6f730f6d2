"""
Validation Gates - HALT/PASS framework for note parameter sets.

Checks a FinancialParameters set for well-formedness before it is used to
price anything. Gates can HALT (reject with diagnostics), WARN (allow with
a logged diagnostic) or PASS.

[T1] Required fields must be finite real numbers.
[T1] buffer_threshold must lie in (0, 1].
[T1] principal_amount must be positive.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any

from structured_notes.config.settings import SETTINGS
from structured_notes.data.schemas import FinancialParameters
from structured_notes.errors import InvalidParameterError

logger = logging.getLogger(__name__)

#: Fields that must be numeric; monthly_interest_rate is informational only
REQUIRED_NUMERIC_FIELDS: tuple[str, ...] = (
    "principal_amount",
    "contingent_interest_rate",
    "buffer_threshold",
    "buffer_amount",
    "contingent_interest_payment",
)


def _is_real_number(value: Any) -> bool:
    """Check for a finite real number (bool, NaN and ±inf excluded)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


class GateStatus(Enum):
    """Status of a validation gate."""
    PASS = "pass"
    HALT = "halt"
    WARN = "warn"


@dataclass(frozen=True)
class GateResult:
    """
    Result of a validation gate check.

    Attributes
    ----------
    status : GateStatus
        PASS, HALT, or WARN
    gate_name : str
        Name of the gate that was checked
    message : str
        Explanation of the result
    value : Any, optional
        The value that was checked
    threshold : Any, optional
        The threshold that was applied
    """

    status: GateStatus
    gate_name: str
    message: str
    value: Any | None = None
    threshold: Any | None = None

    @property
    def passed(self) -> bool:
        """Check if gate passed (PASS or WARN)."""
        return self.status != GateStatus.HALT


@dataclass(frozen=True)
class ValidationReport:
    """
    Complete validation report from all gates.

    Attributes
    ----------
    results : tuple[GateResult, ...]
        Results from all gates
    """

    results: tuple[GateResult, ...]

    @property
    def overall_status(self) -> GateStatus:
        """Get worst status across all gates."""
        if any(r.status == GateStatus.HALT for r in self.results):
            return GateStatus.HALT
        elif any(r.status == GateStatus.WARN for r in self.results):
            return GateStatus.WARN
        return GateStatus.PASS

    @property
    def passed(self) -> bool:
        """Check if all gates passed (no HALTs)."""
        return self.overall_status != GateStatus.HALT

    @property
    def halted_gates(self) -> list[GateResult]:
        """Get all gates that halted."""
        return [r for r in self.results if r.status == GateStatus.HALT]

    @property
    def warned_gates(self) -> list[GateResult]:
        """Get all gates that warned."""
        return [r for r in self.results if r.status == GateStatus.WARN]

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "overall_status": self.overall_status.value,
            "passed": self.passed,
            "n_halted": len(self.halted_gates),
            "n_warned": len(self.warned_gates),
            "results": [
                {
                    "gate": r.gate_name,
                    "status": r.status.value,
                    "message": r.message,
                    "value": r.value,
                    "threshold": r.threshold,
                }
                for r in self.results
            ],
        }


# =============================================================================
# Gate Implementations
# =============================================================================

class ParameterGate:
    """
    Base class for parameter validation gates.

    Subclasses implement check() to validate a parameter set.
    """

    name: str = "base_gate"

    def check(self, params: FinancialParameters) -> GateResult:
        """
        Check the parameter set.

        Parameters
        ----------
        params : FinancialParameters
            Parameters to validate

        Returns
        -------
        GateResult
            Validation result
        """
        raise NotImplementedError

    def _pass(self, message: str, value: Any = None) -> GateResult:
        return GateResult(
            status=GateStatus.PASS,
            gate_name=self.name,
            message=message,
            value=value,
        )


class NumericFieldsGate(ParameterGate):
    """
    Check that every required field is a real number.

    [T1] Strings, None, bool, NaN and ±inf are rejected.
    """

    name = "numeric_fields"

    def check(self, params: FinancialParameters) -> GateResult:
        invalid = [
            field
            for field in REQUIRED_NUMERIC_FIELDS
            if not _is_real_number(getattr(params, field, None))
        ]

        if invalid:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message="; ".join(f"{field} must be a number" for field in invalid),
                value=invalid,
            )

        return self._pass("All required fields are numeric")


class BufferThresholdGate(ParameterGate):
    """
    Check buffer threshold lies in (0, 1].

    [T1] Threshold is a ratio of Final Value to Initial Value. A threshold
    above 1 would require a gain for protection; 0 would protect everything.
    """

    name = "buffer_threshold_bounds"

    def check(self, params: FinancialParameters) -> GateResult:
        threshold = params.buffer_threshold
        if not _is_real_number(threshold):
            return self._pass("Buffer threshold not numeric, skipping")

        if threshold <= 0 or threshold > 1:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"Buffer threshold must be between 0 and 1, got {threshold}",
                value=threshold,
                threshold=(0.0, 1.0),
            )

        return self._pass(f"Buffer threshold {threshold:.4f} within (0, 1]", threshold)


class PrincipalAmountGate(ParameterGate):
    """
    Check principal amount is positive.

    [T1] A note with no principal has no payment to compute.
    """

    name = "principal_amount_positive"

    def check(self, params: FinancialParameters) -> GateResult:
        principal = params.principal_amount
        if not _is_real_number(principal):
            return self._pass("Principal amount not numeric, skipping")

        if principal <= 0:
            return GateResult(
                status=GateStatus.HALT,
                gate_name=self.name,
                message=f"Principal amount must be positive, got {principal}",
                value=principal,
                threshold=0.0,
            )

        return self._pass(f"Principal amount {principal:,.2f} is positive", principal)


class InterestRateGate(ParameterGate):
    """
    Check contingent interest rate lies in [0, 1].

    Informational: the rate does not enter the payment formula, so an
    out-of-range value only WARNs.
    """

    name = "contingent_interest_rate_bounds"

    def check(self, params: FinancialParameters) -> GateResult:
        rate = params.contingent_interest_rate
        if not _is_real_number(rate):
            return self._pass("Contingent interest rate not numeric, skipping")

        if rate < 0 or rate > 1:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=f"Contingent interest rate {rate:.4f} outside [0, 1]",
                value=rate,
                threshold=(0.0, 1.0),
            )

        return self._pass(f"Contingent interest rate {rate:.4f} within [0, 1]", rate)


class BufferConsistencyGate(ParameterGate):
    """
    Check buffer amount equals 1 - buffer threshold.

    [T1] For a standard buffered note the cushion equals the distance from
    the threshold to par. Mismatches are legal but unusual, so WARN.
    """

    name = "buffer_consistency"

    def __init__(self, tolerance: float | None = None):
        """
        Parameters
        ----------
        tolerance : float, optional
            Allowed absolute gap (default from SETTINGS.validation)
        """
        if tolerance is None:
            tolerance = SETTINGS.validation.buffer_consistency_tolerance
        self.tolerance = tolerance

    def check(self, params: FinancialParameters) -> GateResult:
        threshold = params.buffer_threshold
        amount = params.buffer_amount
        if not (_is_real_number(threshold) and _is_real_number(amount)):
            return self._pass("Buffer fields not numeric, skipping")

        expected = 1.0 - threshold
        if abs(amount - expected) > self.tolerance:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=f"Buffer amount {amount:.4f} doesn't match "
                        f"1 - buffer threshold ({expected:.4f})",
                value=amount,
                threshold=expected,
            )

        return self._pass(f"Buffer amount {amount:.4f} consistent with threshold", amount)


class CouponPaymentGate(ParameterGate):
    """
    Check contingent interest payment is positive.

    A zero or negative coupon makes the protected payoff no better than
    principal, which is almost certainly a data entry error. WARN only.
    """

    name = "contingent_interest_payment_positive"

    def check(self, params: FinancialParameters) -> GateResult:
        coupon = params.contingent_interest_payment
        if not _is_real_number(coupon):
            return self._pass("Contingent interest payment not numeric, skipping")

        if coupon <= 0:
            return GateResult(
                status=GateStatus.WARN,
                gate_name=self.name,
                message=f"Contingent interest payment {coupon:.4f} is not positive",
                value=coupon,
                threshold=0.0,
            )

        return self._pass(f"Contingent interest payment {coupon:.4f} is positive", coupon)


# =============================================================================
# Validation Engine
# =============================================================================

class ValidationEngine:
    """
    Engine for running validation gates on a parameter set.

    Parameters
    ----------
    gates : list[ParameterGate], optional
        Custom gates to use. If None, uses default gates.

    Examples
    --------
    >>> engine = ValidationEngine()
    >>> report = engine.validate(FinancialParameters(buffer_threshold=1.5))
    >>> report.passed
    False
    """

    def __init__(
        self,
        gates: list[ParameterGate] | None = None,
    ):
        if gates is None:
            gates = self._default_gates()
        self.gates = gates

    def _default_gates(self) -> list[ParameterGate]:
        """Create default set of validation gates."""
        return [
            NumericFieldsGate(),
            BufferThresholdGate(),
            PrincipalAmountGate(),
            InterestRateGate(),
            BufferConsistencyGate(),
            CouponPaymentGate(),
        ]

    def validate(self, params: FinancialParameters) -> ValidationReport:
        """
        Run all validation gates on a parameter set.

        Parameters
        ----------
        params : FinancialParameters
            Parameters to validate

        Returns
        -------
        ValidationReport
            Complete validation report
        """
        results = tuple(gate.check(params) for gate in self.gates)
        report = ValidationReport(results=results)

        for gate in report.warned_gates:
            logger.warning(f"Parameter gate {gate.gate_name}: {gate.message}")

        return report

    def validate_and_raise(self, params: FinancialParameters) -> bool:
        """
        Validate and raise exception on HALT.

        Parameters
        ----------
        params : FinancialParameters
            Parameters to validate

        Returns
        -------
        bool
            True if validation passes

        Raises
        ------
        InvalidParameterError
            If any gate HALTs
        """
        report = self.validate(params)

        if not report.passed:
            halt_messages = [g.message for g in report.halted_gates]
            raise InvalidParameterError(
                "CRITICAL: Invalid parameters. HALTs:\n" +
                "\n".join(f"  - {m}" for m in halt_messages)
            )

        return True


# =============================================================================
# Convenience Functions
# =============================================================================

def run_parameter_gates(params: FinancialParameters) -> ValidationReport:
    """
    Run the default gates without raising.

    Parameters
    ----------
    params : FinancialParameters
        Parameters to validate

    Returns
    -------
    ValidationReport
        Validation report
    """
    return ValidationEngine().validate(params)


def validate_parameters(params: FinancialParameters) -> bool:
    """
    Validate a parameter set, raising if malformed.

    Parameters
    ----------
    params : FinancialParameters
        Parameters to validate

    Returns
    -------
    bool
        True if valid

    Raises
    ------
    InvalidParameterError
        If a required field is not numeric, buffer_threshold is outside
        (0, 1], or principal_amount is not positive

    Examples
    --------
    >>> validate_parameters(FinancialParameters())
    True
    """
    return ValidationEngine().validate_and_raise(params)
