"""optdl - Declarative drive-letter management for optical disk drives."""

__version__ = "0.3.0"
