"""
skyframes.exceptions — Error Types
===================================

Domain-specific exceptions raised by the coordinate and footprint code.
Both concrete errors also derive from ``ValueError`` so callers that guard
the frame API with ``except ValueError`` keep working.
"""


class SkyFramesError(Exception):
    """Base exception for all skyframes errors."""
    pass


class DomainError(SkyFramesError, ValueError):
    """Raised when an input lies outside the domain of a conversion.

    Examples: declination outside [−π/2, π/2], a negative radius, or a
    zero-length vector where a direction is required.
    """
    pass


class MalformedFootprintError(SkyFramesError, ValueError):
    """Raised when stripe records are internally inconsistent."""
    pass
