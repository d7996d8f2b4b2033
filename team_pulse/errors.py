class TeamPulseError(Exception):
    """Base exception for workflow errors shown to the user."""

    pass


class ConfigurationError(TeamPulseError):
    """Store or credential setup is missing or invalid. Not retried."""

    pass


class MissingCredential(ConfigurationError):
    """No API key is configured for the inference endpoint."""

    pass


class StoreUnavailable(ConfigurationError):
    """The store could not be reached or the session could not be established."""

    pass


class StoreError(TeamPulseError):
    """The store rejected a read or write."""

    pass


class ValidationError(TeamPulseError):
    """A required field is empty."""

    pass


class PreconditionError(TeamPulseError):
    """An operation was attempted before its prerequisite."""

    pass


class ModelRequestFailed(TeamPulseError):
    """The inference endpoint returned a non-success response."""

    def __init__(self, details: str, message: str = ""):
        self.details = details
        super().__init__(message or f"AI request failed: {details}")
