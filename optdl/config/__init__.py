"""Resource configuration loading and validation."""
from optdl.config.loader import ResourceConfigLoader
from optdl.config.validator import ResourceConfigValidator

__all__ = ['ResourceConfigLoader', 'ResourceConfigValidator']
