"""
Centralized tolerance framework for structured note payment calculations.

All tolerances are derived from precision requirements, not ad hoc tuning.

Tolerance Tiers:
    Tier 1 (Analytical): Closed-form payments, machine precision achievable
    Tier 2 (Display): Rounding applied when rendering payment tables
    Tier 3 (Consistency): Cross-field parameter checks

References:
    [T1] Higham (2002) "Accuracy and Stability of Numerical Algorithms"
"""

from typing import Final

# =============================================================================
# Tier 1: Analytical Tolerances (Deterministic)
# =============================================================================
# Payment at maturity is a two-branch closed form, so results are exact up
# to float64 accumulation in principal * (return + buffer).

#: Scalar vs vectorized payment agreement
VECTORIZED_CONSISTENCY_TOLERANCE: Final[float] = 1e-10

#: Zero floor enforcement: payment >= 0
FLOOR_ENFORCEMENT_TOLERANCE: Final[float] = 1e-10

#: Downside participation: payment = principal * (1 + return + buffer)
#: Tolerance scales with principal (1000 * 2.2e-16 * a few operations)
DOWNSIDE_FORMULA_TOLERANCE: Final[float] = 1e-9

#: Monotonicity checks in the downside region
MONOTONICITY_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# Tier 2: Display Tolerances
# =============================================================================

#: Payments are rendered to 4 decimal places ($1010.1667)
DISPLAY_TOLERANCE: Final[float] = 5e-5


# =============================================================================
# Tier 3: Parameter Consistency Tolerances
# =============================================================================

#: buffer_amount is expected to equal 1 - buffer_threshold
#: 0.10 vs 1 - 0.90 differs by ~2.8e-17 in float64
BUFFER_CONSISTENCY_TOLERANCE: Final[float] = 1e-9


# =============================================================================
# Tolerance Registry (For Dynamic Access)
# =============================================================================

TOLERANCE_REGISTRY: dict[str, float] = {
    # Tier 1: Analytical
    "vectorized_consistency": VECTORIZED_CONSISTENCY_TOLERANCE,
    "floor_enforcement": FLOOR_ENFORCEMENT_TOLERANCE,
    "downside_formula": DOWNSIDE_FORMULA_TOLERANCE,
    "monotonicity": MONOTONICITY_TOLERANCE,
    # Tier 2: Display
    "display": DISPLAY_TOLERANCE,
    # Tier 3: Consistency
    "buffer_consistency": BUFFER_CONSISTENCY_TOLERANCE,
}


def get_tolerance(name: str) -> float:
    """
    Get tolerance by name from registry.

    Parameters
    ----------
    name : str
        Tolerance name (see TOLERANCE_REGISTRY keys)

    Returns
    -------
    float
        Tolerance value

    Raises
    ------
    KeyError
        If tolerance name not found
    """
    if name not in TOLERANCE_REGISTRY:
        available = ", ".join(sorted(TOLERANCE_REGISTRY.keys()))
        raise KeyError(f"Unknown tolerance '{name}'. Available: {available}")
    return TOLERANCE_REGISTRY[name]
