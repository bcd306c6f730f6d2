"""
Parameter override loader.

NEVER fails silently - an unreadable or malformed override file raises
ParameterLoadError rather than falling back to defaults. Defaults are only
used when no override path is configured at all.
"""

import json
import logging
from pathlib import Path

from structured_notes.config.settings import DataConfig
from structured_notes.data.schemas import DEFAULT_PARAMETERS, FinancialParameters
from structured_notes.errors import ParameterLoadError

logger = logging.getLogger(__name__)


class _NonFiniteConstantError(ValueError):
    """Raised while parsing when the file contains NaN, Infinity or -Infinity."""


def _reject_constant(token: str) -> float:
    raise _NonFiniteConstantError(token)


def load_parameters(path: Path | str) -> FinancialParameters:
    """
    Load a FinancialParameters override record from a JSON file.

    The file holds a single JSON object; keys may be snake_case field
    names or legacy UPPER_SNAKE names. Missing keys keep their defaults.

    Parameters
    ----------
    path : Path or str
        JSON file path

    Returns
    -------
    FinancialParameters
        Parameters with overrides applied (not yet validated)

    Raises
    ------
    ParameterLoadError
        If the file is missing, unreadable, not JSON, holds NaN or
        Infinity tokens, or is not an object
    InvalidParameterError
        If the object contains unknown keys
    """
    path = Path(path)

    if not path.exists():
        raise ParameterLoadError(f"Parameter file not found: {path}")

    try:
        with open(path) as f:
            record = json.load(f, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParameterLoadError(f"Parameter file {path} is not valid JSON: {e}") from e
    except _NonFiniteConstantError as e:
        raise ParameterLoadError(
            f"Parameter file {path} contains non-finite constant {e}; "
            f"values must be finite numbers"
        ) from e
    except OSError as e:
        raise ParameterLoadError(f"Failed to read parameter file {path}: {e}") from e

    if not isinstance(record, dict):
        raise ParameterLoadError(
            f"Parameter file {path} must contain a JSON object, "
            f"got {type(record).__name__}"
        )

    logger.info(f"Loaded {len(record)} parameter override(s) from {path}")
    return FinancialParameters.from_dict(record)


def resolve_parameters(path: Path | str | None = None) -> FinancialParameters:
    """
    Resolve the parameter set to use.

    Priority:
    1. Explicit path argument
    2. STRUCTURED_NOTES_PARAMS environment variable
    3. DEFAULT_PARAMETERS

    Parameters
    ----------
    path : Path or str, optional
        Explicit override file

    Returns
    -------
    FinancialParameters
        Resolved parameters (not yet validated)
    """
    if path is None:
        path = DataConfig().params_path

    if path is None:
        return DEFAULT_PARAMETERS

    return load_parameters(path)
