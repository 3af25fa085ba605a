"""Configuration model errors."""


class ConfigValidationError(Exception):
    """Raised when an optdl resource configuration file is invalid."""
