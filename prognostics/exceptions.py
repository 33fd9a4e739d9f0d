"""
Exception hierarchy for the prognostics framework.

All errors raised by models, vectors and prognosers derive from
PrognosticsError. Each also subclasses the closest builtin so callers that
only expect ValueError / IndexError / KeyError keep working.
"""


class PrognosticsError(Exception):
    """Base class for all prognostics framework errors."""


class ConstructionError(PrognosticsError, ValueError):
    """Raised when a model or vector is built from invalid shape arguments."""


class ContractViolation(PrognosticsError):
    """Raised when an equation is called or answers outside its contract."""


class PreconditionError(ContractViolation, ValueError):
    """An equation received an argument of the wrong length."""


class PostconditionError(ContractViolation):
    """A model implementation returned a vector of the wrong length."""


class OutOfRangeError(PrognosticsError, IndexError):
    """Vector access beyond its declared length."""


class ConfigurationError(PrognosticsError, KeyError):
    """Missing or invalid configuration values."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable
        return str(self.args[0]) if self.args else ""
