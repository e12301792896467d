class InfraConfigError(Exception):
    """Base class for deployment configuration errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnknownEnvironmentError(InfraConfigError):
    """Raised when no environment values are registered for the requested name."""
