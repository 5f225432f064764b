"""
Error taxonomy for the projection engine

Closed set of error kinds returned to callers as exceptions:

- Construction errors (raised by the factory): UnknownFamily, MissingEllipsoid,
  InvalidParameterCombination. The caller may retry with corrected parameters.
- Transform errors (raised by forward/inverse): OutOfDomain, DidNotConverge.
  The caller may reject the offending point and keep the projection.
- AngleParseError: malformed degree-minute-second text.

Nothing is retried internally and nothing is logged here.
"""

from enum import Enum


# =============================================================================
# ERROR KINDS
# =============================================================================


class ErrorKind(str, Enum):
    """Machine-readable kind attached to every ProjectionError."""

    UNKNOWN_FAMILY = "unknown_family"
    MISSING_ELLIPSOID = "missing_ellipsoid"
    INVALID_PARAMETER_COMBINATION = "invalid_parameter_combination"
    OUT_OF_DOMAIN = "out_of_domain"
    DID_NOT_CONVERGE = "did_not_converge"
    ANGLE_PARSE = "angle_parse"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class ProjectionError(Exception):
    """Root of all errors raised by the engine."""

    kind: ErrorKind


class ConstructionError(ProjectionError):
    """A projection could not be built from the supplied parameters."""


class TransformError(ProjectionError):
    """A single point could not be mapped by an otherwise valid projection."""


class UnknownFamily(ConstructionError):
    """The `proj` key is absent or names no registered projection family."""

    kind = ErrorKind.UNKNOWN_FAMILY


class MissingEllipsoid(ConstructionError):
    """Neither a named ellipsoid nor an explicit a + rf/f/b/es pair was supplied."""

    kind = ErrorKind.MISSING_ELLIPSOID


class InvalidParameterCombination(ConstructionError):
    """
    Family-specific constraint violated.

    Example: Albers Equal-Area with lat_1 == -lat_2 (the cone degenerates).
    """

    kind = ErrorKind.INVALID_PARAMETER_COMBINATION


class OutOfDomain(TransformError):
    """Input point lies outside the region the family can represent."""

    kind = ErrorKind.OUT_OF_DOMAIN


class DidNotConverge(TransformError):
    """An iterative solver exceeded its iteration cap."""

    kind = ErrorKind.DID_NOT_CONVERGE

    def __init__(self, message: str, iterations: int = 0):
        super().__init__(message)
        self.iterations = iterations


class AngleParseError(ProjectionError, ValueError):
    """Angle text contains no parseable degree-minute-second value."""

    kind = ErrorKind.ANGLE_PARSE
