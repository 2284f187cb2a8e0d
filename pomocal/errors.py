"""Exception types shared across pomocal."""


class PomocalError(Exception):
    """Base class for application errors."""


class ConfigurationError(PomocalError):
    """Credentials or tokens are missing, or a token refresh failed."""


class CalendarUnavailableError(PomocalError):
    """The calendar service could not be reached or answered with an error."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class InvalidInputError(PomocalError):
    """Input was rejected before anything was written."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class NotFoundError(PomocalError):
    """The referenced record does not exist for this user."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}")
        self.resource = resource
        self.identifier = identifier
