"""Application error hierarchy mapped to HTTP responses."""


class PlantTrackerError(Exception):
    """Base error carrying a user-facing message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PlantTrackerError):
    """A required request field is missing or invalid."""

    status_code = 400


class AuthorizationError(PlantTrackerError):
    """No authenticated caller for the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(PlantTrackerError):
    """The resource is absent or not owned by the caller."""

    status_code = 404


class StateConflictError(PlantTrackerError):
    """The resource is not in the state the operation requires."""

    status_code = 400


class DownstreamError(PlantTrackerError):
    """A downstream service call failed."""

    status_code = 500
