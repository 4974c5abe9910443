"""Exception hierarchy for cloudline."""


class CloudlineError(Exception):
    """Base exception for cloudline errors."""
    pass


class UnknownLevelError(CloudlineError, KeyError):
    """Raised when a log level name or rank was never registered.

    This is a configuration error: there is no default severity to fall back to.
    """

    def __init__(self, level: object) -> None:
        self.level = level
        super().__init__(f"Unknown log level: {level!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message a second time
        return self.args[0]


class ServiceContextError(CloudlineError):
    """Raised when the service context name cannot be discovered."""
    pass
