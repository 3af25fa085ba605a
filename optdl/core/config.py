"""optdl runtime configuration and settings."""
import os
from dataclasses import dataclass
from typing import Optional

_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _BOOL_TRUE


@dataclass
class OptdlConfig:
    """Runtime configuration for optdl operations.

    Attributes:
        powershell_executable: PowerShell binary used for CIM queries (default: powershell.exe)
        query_timeout: Timeout in seconds for a single OS query or mutation (default: 60)
        locale: Message bundle locale (default: en-US)
        verify_before_set: Re-check letter ownership right before mutating (default: False)
        mock: Use the in-memory mock host instead of the OS (default: False)
        mock_state: YAML file describing the mock host (optional)
    """

    powershell_executable: str = "powershell.exe"
    query_timeout: int = 60
    locale: str = "en-US"
    verify_before_set: bool = False
    mock: bool = False
    mock_state: Optional[str] = None

    @classmethod
    def from_env(cls) -> "OptdlConfig":
        """Create config from environment variables.

        Environment variables:
            OPTDL_POWERSHELL: PowerShell executable
            OPTDL_QUERY_TIMEOUT: OS query timeout in seconds
            OPTDL_LOCALE: Message locale
            OPTDL_VERIFY_BEFORE_SET: Re-verify letter ownership inside Set
            OPTDL_MOCK: Use the mock host
            OPTDL_MOCK_STATE: Mock host YAML description

        Returns:
            OptdlConfig instance with values from environment or defaults
        """
        return cls(
            powershell_executable=os.getenv("OPTDL_POWERSHELL", cls.powershell_executable),
            query_timeout=int(os.getenv("OPTDL_QUERY_TIMEOUT", cls.query_timeout)),
            locale=os.getenv("OPTDL_LOCALE", cls.locale),
            verify_before_set=_env_bool("OPTDL_VERIFY_BEFORE_SET", cls.verify_before_set),
            mock=_env_bool("OPTDL_MOCK", cls.mock),
            mock_state=os.getenv("OPTDL_MOCK_STATE") or None,
        )


# Global config instance (can be overridden)
_config: Optional[OptdlConfig] = None


def get_config() -> OptdlConfig:
    """Get the global optdl configuration.

    Returns:
        OptdlConfig instance (creates from environment if not set)
    """
    global _config
    if _config is None:
        _config = OptdlConfig.from_env()
    return _config


def set_config(config: Optional[OptdlConfig]):
    """Set the global optdl configuration.

    Args:
        config: OptdlConfig instance to use globally, or None to re-read the environment
    """
    global _config
    _config = config
