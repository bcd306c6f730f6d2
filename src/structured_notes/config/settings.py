"""
Frozen configuration settings for structured note payment tables.

All configuration is immutable (frozen dataclasses) to ensure reproducibility.
Parameter values themselves live in data/schemas.py (DEFAULT_PARAMETERS);
this module only controls how tables are generated, validated and rendered.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from structured_notes.config.tolerances import BUFFER_CONSISTENCY_TOLERANCE

#: Environment variable naming a JSON parameter override file
PARAMS_PATH_ENV_VAR = "STRUCTURED_NOTES_PARAMS"


# =============================================================================
# Data Configuration
# =============================================================================

def _resolve_params_path() -> Path | None:
    """
    Resolve the parameter override file path from the environment.

    Returns
    -------
    Path or None
        Path from STRUCTURED_NOTES_PARAMS if set, else None (use defaults)
    """
    env_path = os.environ.get(PARAMS_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return None


@dataclass(frozen=True)
class DataConfig:
    """
    Immutable data configuration.

    Attributes
    ----------
    params_path : Path, optional
        JSON override record for FinancialParameters.
        Override with STRUCTURED_NOTES_PARAMS environment variable.
    """

    params_path: Path | None = None

    def __post_init__(self) -> None:
        """Initialize params_path using resolver function."""
        if self.params_path is None:
            object.__setattr__(self, "params_path", _resolve_params_path())


# =============================================================================
# Payment Table Configuration
# =============================================================================

@dataclass(frozen=True)
class NoteConfig:
    """
    Immutable payment table configuration.

    Attributes
    ----------
    sample_returns : tuple[float, ...]
        Underlying returns tabulated by default, in display order
    return_decimals : int
        Decimal places for return labels (-10.01%)
    payment_decimals : int
        Decimal places for payment labels ($1010.1667)
    error_marker : str
        Label used for rows whose computation failed
    """

    sample_returns: tuple[float, ...] = (
        0.60,
        0.40,
        0.20,
        0.05,
        0.00,
        -0.05,
        -0.10,    # Exactly at buffer threshold (protected)
        -0.1001,  # Just below buffer threshold
        -0.20,
        -0.30,
        -0.40,
        -0.60,
        -0.80,
        -1.00,
    )
    return_decimals: int = 2
    payment_decimals: int = 4
    error_marker: str = "ERROR"


# =============================================================================
# Validation Configuration
# =============================================================================

@dataclass(frozen=True)
class ValidationConfig:
    """
    Immutable validation configuration.

    Attributes
    ----------
    halt_on_invalid_parameters : bool
        Whether table generation refuses malformed parameter sets
    total_loss_return : float
        Returns below this trigger a non-fatal advisory
    buffer_consistency_tolerance : float
        Allowed gap between buffer_amount and 1 - buffer_threshold
    """

    halt_on_invalid_parameters: bool = True
    total_loss_return: float = -1.0
    buffer_consistency_tolerance: float = BUFFER_CONSISTENCY_TOLERANCE


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Master frozen configuration combining all sub-configs.

    Usage
    -----
    >>> from structured_notes.config.settings import SETTINGS
    >>> SETTINGS.note.payment_decimals
    4
    """

    data: DataConfig = DataConfig()
    note: NoteConfig = NoteConfig()
    validation: ValidationConfig = ValidationConfig()


# Singleton instance - import this
SETTINGS = Settings()
