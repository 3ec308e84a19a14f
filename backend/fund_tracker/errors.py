"""Exception hierarchy for the fund tracker."""


class TrackerError(Exception):
    """Base exception for all fund tracker errors."""

    pass


class FundValidationError(TrackerError):
    """Raised when a fund or member entry fails validation."""

    pass


class AuthError(TrackerError):
    """Raised when registration or login is rejected."""

    pass


class NotFoundError(TrackerError):
    """Raised when a member or fund id does not exist in the portfolio."""

    pass


class SimulationError(TrackerError):
    """Raised for growth simulation inputs outside the supported domain."""

    pass


class LookupUnavailableError(TrackerError):
    """Raised when NAV data cannot be obtained for a holding."""

    pass
