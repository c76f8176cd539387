# jyotish_engine/core/errors.py


class JyotishError(ValueError):
    """
    Base exception for every error raised by the computation core.
    `code` is stable and safe to expose to API callers.
    """
    code = "JYOTISH_ERROR"


class InvalidDateError(JyotishError):
    """Calendar fields outside the supported range."""
    code = "INVALID_DATE"


class InvalidLongitudeError(JyotishError):
    """Missing, non-numeric or non-finite angular input."""
    code = "INVALID_LONGITUDE"


class OutOfRangeError(InvalidLongitudeError):
    """Angular input that was not normalised into [0, 360)."""
    code = "OUT_OF_RANGE"


class UnsupportedDashaSystemError(JyotishError):
    code = "UNSUPPORTED_DASHA_SYSTEM"


class UnsupportedPlanetError(JyotishError):
    """No rule-table entry for the requested target planet."""
    code = "UNSUPPORTED_PLANET"


class UnknownPlanetError(JyotishError):
    """Inputs lack the longitude/velocity data a planet needs."""
    code = "UNKNOWN_PLANET"


class InvalidIntervalError(JyotishError):
    code = "INVALID_INTERVAL"


class LocationNotFoundError(JyotishError):
    code = "LOCATION_NOT_FOUND"
