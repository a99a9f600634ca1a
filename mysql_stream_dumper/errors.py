"""
Error taxonomy for MySQL Stream Dumper.
"""


class DumperError(Exception):
    """Base class for all dumper errors."""


class ConfigurationError(DumperError, ValueError):
    """Raised when dump options are invalid or contradict each other."""


class MissingDatabase(DumperError):
    """Raised when the connection has no schema selected."""


class SchemaExtractionWarning(DumperError):
    """Raised when the DDL of a catalog object cannot be retrieved.

    The sequencer logs it and moves on to the next object.
    """

    def __init__(self, name: str, reason: str = "empty create statement"):
        super().__init__(f"Missing create info for '{name}': {reason}")
        self.name = name
        self.reason = reason


class TransportError(DumperError):
    """Raised when the connection, a cursor or an output sink fails."""
