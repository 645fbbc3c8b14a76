"""Exception types raised by the loan amortizer.

Both errors derive from ``ValueError`` so callers that already guard the
calculation with ``except ValueError`` continue to work.
"""


class LoanCalculatorError(ValueError):
    """Base class for all errors raised by the calculator."""


class ValidationError(LoanCalculatorError):
    """Input parameters are malformed or out of range.

    Raised before any computation starts. The caller should report the
    message to the user and must not invoke the engine.
    """


class ConfigurationError(LoanCalculatorError):
    """Structurally required data is missing at the point of use."""
