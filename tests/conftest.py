"""Shared test fixtures for optdl tests."""
import pytest

from optdl.core.messages import MessageBundle
from optdl.core.resource import OpticalDiskDriveLetter
from optdl.services.windows.mock import MockHost


@pytest.fixture
def messages():
    """Packaged en-US message bundle."""
    return MessageBundle.load("en-US")


@pytest.fixture
def host():
    """Empty mock host."""
    return MockHost()


@pytest.fixture
def physical_and_image_host():
    """Physical drive D: followed by a mounted ISO as E:, plus a system volume C:."""
    return MockHost.demo()


@pytest.fixture
def resource_for(messages):
    """Build an OpticalDiskDriveLetter bound to a mock host."""
    def _build(mock_host, **kwargs):
        return OpticalDiskDriveLetter(mock_host, messages=messages, **kwargs)
    return _build


# Common test data
@pytest.fixture
def host_state_yaml(tmp_path):
    """Mock host description file: one physical drive without letter, one ISO."""
    state = tmp_path / "host.yml"
    state.write_text(
        """
volumes:
  - drive_letter: "C:"
    label: System
  - drive_letter: "H:"
    label: Backup
optical_drives:
  - caption: "HL-DT-ST DVD+-RW GHB0N"
  - drive_letter: "E:"
    caption: "Microsoft Virtual DVD-ROM"
    image_path: 'C:\\images\\install.iso'
"""
    )
    return state
