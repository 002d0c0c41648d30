"""
Domain exceptions raised at the record boundary.

Malformed or out-of-range input is rejected here, before any record
reaches the store or the capacity model.
"""


class FormatError(ValueError):
    """Raised when a clock string does not look like H, HH, H:MM or HH:MM."""
    pass


class RangeError(ValueError):
    """Raised when a value is well formed but outside its allowed range."""
    pass


class CoasterNotFoundError(KeyError):
    """Raised when a coaster id is not present in the registry."""
    pass


class WagonNotFoundError(KeyError):
    """Raised when a wagon id is not present in a coaster's fleet."""
    pass
