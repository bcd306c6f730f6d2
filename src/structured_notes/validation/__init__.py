"""
Validation framework for note parameter sets.

Provides HALT/PASS gates for validating FinancialParameters:
- NumericFieldsGate: Required fields are real numbers
- BufferThresholdGate: Threshold within (0, 1]
- PrincipalAmountGate: Principal positive
- InterestRateGate: Contingent rate within [0, 1] (WARN)
- BufferConsistencyGate: Buffer amount equals 1 - threshold (WARN)
- CouponPaymentGate: Coupon positive (WARN)
"""

from structured_notes.validation.gates import (
    BufferConsistencyGate,
    BufferThresholdGate,
    CouponPaymentGate,
    GateResult,
    # Enums and Results
    GateStatus,
    InterestRateGate,
    # Specific Gates
    NumericFieldsGate,
    # Base Gate
    ParameterGate,
    PrincipalAmountGate,
    # Engine
    ValidationEngine,
    ValidationReport,
    # Convenience Functions
    run_parameter_gates,
    validate_parameters,
)

__all__ = [
    # Enums and Results
    "GateStatus",
    "GateResult",
    "ValidationReport",
    # Base Gate
    "ParameterGate",
    # Specific Gates
    "NumericFieldsGate",
    "BufferThresholdGate",
    "PrincipalAmountGate",
    "InterestRateGate",
    "BufferConsistencyGate",
    "CouponPaymentGate",
    # Engine
    "ValidationEngine",
    # Convenience Functions
    "run_parameter_gates",
    "validate_parameters",
]
