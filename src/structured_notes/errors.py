"""
Exception types for structured note calculations.

NEVER fails silently: malformed inputs raise immediately and are not retried.
Input and parameter errors subclass ValueError so callers catching the
builtin keep working.
"""


class InvalidInputError(ValueError):
    """Raised when an underlying return is not a real number."""

    pass


class InvalidParameterError(ValueError):
    """Raised when a FinancialParameters set fails validation."""

    pass


class ParameterLoadError(Exception):
    """Raised when a parameter override file cannot be read or parsed."""

    pass
