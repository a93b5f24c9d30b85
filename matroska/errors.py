class MatroskaError(Exception):
    """Base class for errors raised by the rules engine."""


class RuleViolation(MatroskaError):
    """A placement or removal would break a board invariant."""


class InvalidConstruction(MatroskaError, ValueError):
    """A value object was built from inconsistent or out-of-range data."""
