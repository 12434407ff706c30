"""Fatal error types for Streamline (engine-agnostic)."""


class StreamlineError(Exception):
    """Base class for errors that abort a whole run."""


class IngestionError(StreamlineError):
    """The analysis engine could not be queried or returned malformed data."""


class ConfigurationError(StreamlineError):
    """A required input (weight table, backend selection) is missing or invalid."""
