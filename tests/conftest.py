"""
Centralized pytest fixtures for the structured-notes test suite.

Fixture Categories:
1. Tolerance tiers - shared numerical tolerances
2. Parameter sets - reference term sheet and variants
3. Sample returns - the reference table inputs
4. Override files - JSON parameter records on disk
"""

import json
from dataclasses import dataclass
from pathlib import Path

import pytest

from structured_notes.config.settings import SETTINGS
from structured_notes.data.schemas import FinancialParameters


# =============================================================================
# TOLERANCE TIERS
# =============================================================================

@dataclass(frozen=True)
class ToleranceTiers:
    """
    Tiered tolerance framework for different test types.
    """

    # Anti-pattern tests: Very tight (fundamental violations)
    anti_pattern: float = 1e-10

    # Closed-form downside payments on a $1,000 principal
    payment: float = 1e-9

    # Rendered values (4 decimal places)
    display: float = 5e-5


TOLERANCES = ToleranceTiers()


@pytest.fixture(scope="session")
def tolerances() -> ToleranceTiers:
    """Provide tiered tolerance settings for all tests."""
    return TOLERANCES


# =============================================================================
# PARAMETER SETS
# =============================================================================

@pytest.fixture
def default_params() -> FinancialParameters:
    """Reference term sheet: $1,000, 12.20% p.a., 90% threshold, 10% buffer."""
    return FinancialParameters()


@pytest.fixture
def deep_buffer_params() -> FinancialParameters:
    """80% threshold with matching 20% buffer and a larger coupon."""
    return FinancialParameters(
        principal_amount=10_000.0,
        contingent_interest_rate=0.09,
        monthly_interest_rate=0.0075,
        buffer_threshold=0.80,
        buffer_amount=0.20,
        contingent_interest_payment=75.0,
    )


# =============================================================================
# SAMPLE RETURNS
# =============================================================================

@pytest.fixture
def sample_returns() -> tuple[float, ...]:
    """The 14 reference sample returns in display order."""
    return SETTINGS.note.sample_returns


# =============================================================================
# OVERRIDE FILES
# =============================================================================

@pytest.fixture
def write_params_file(tmp_path: Path):
    """Factory writing a JSON override record and returning its path."""

    def _write(record, name: str = "params.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(record))
        return path

    return _write
