class MigroError(Exception):
    """Base class for all errors raised by migro."""


class ConfigError(MigroError):
    """Raised when a config spec cannot be loaded or validated."""


class MappingSourceError(MigroError):
    """Raised when the mapping CSV cannot be read. Aborts the whole run."""


class SourceNotFoundError(MigroError):
    """Raised when a source file named by a mapping row does not exist."""


class SourceReadError(MigroError):
    """Raised when a source file exists but cannot be read or decoded."""


class SourceWriteError(MigroError):
    """Raised when the rewritten source cannot be written back."""
