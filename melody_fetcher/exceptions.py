"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class MelodyFetcherError(Exception):
    """Base exception for all application-specific errors."""


class ConfigurationError(MelodyFetcherError):
    """Raised for issues related to configuration loading or validation."""


class ResolverNotFoundError(MelodyFetcherError):
    """Raised when the resolver binary cannot be spawned."""


class MalformedOutputError(MelodyFetcherError):
    """Raised when the resolver prints something other than the expected JSON."""

    def __init__(self, message: str, output: str = ""):
        super().__init__(message)
        self.output = output


class ArtifactMissingError(MelodyFetcherError):
    """
    Raised when a producing step reports success but the expected file is not
    on disk afterwards.
    """
