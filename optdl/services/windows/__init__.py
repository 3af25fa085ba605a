"""Windows collaborators: CIM backend and in-memory mock host."""
from optdl.core.config import OptdlConfig
from optdl.core.logger import get_logger
from optdl.services.windows.base import (
    DiskImageProber,
    OpticalDriveEnumerator,
    VolumeStore,
    WindowsHost,
)
from optdl.services.windows.cim import CimHost
from optdl.services.windows.mock import MockHost
from optdl.services.windows.powershell import PowerShellRunner

logger = get_logger(__name__)


def create_host(config: OptdlConfig) -> WindowsHost:
    """Return the host backend selected by config."""
    if config.mock:
        if config.mock_state:
            logger.debug(f"MOCK: loading host state from {config.mock_state}")
            return MockHost.from_yaml(config.mock_state)
        return MockHost.demo()

    return CimHost(
        PowerShellRunner(
            executable=config.powershell_executable,
            timeout=config.query_timeout,
        )
    )


__all__ = [
    'CimHost',
    'DiskImageProber',
    'MockHost',
    'OpticalDriveEnumerator',
    'PowerShellRunner',
    'VolumeStore',
    'WindowsHost',
    'create_host',
]
