"""Abstract interfaces for the OS collaborators used by the reconciler."""
from abc import ABC, abstractmethod
from typing import List, Optional

from optdl.models.disk import OpticalDriveRecord, ProbeResult, VolumeHandle


class OpticalDriveEnumerator(ABC):
    """Lists the optical drives known to the OS."""

    @abstractmethod
    def list_optical_drives(self) -> List[OpticalDriveRecord]:
        """Return all optical drive records in OS enumeration order.

        Returns:
            Possibly empty list of records
        """
        pass


class VolumeStore(ABC):
    """Looks up and mutates mounted volumes."""

    @abstractmethod
    def find_volume(
        self,
        drive_letter: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> Optional[VolumeHandle]:
        """Locate a volume by drive letter ("E:") or by raw device id.

        Exactly one of drive_letter or device_id must be given.

        Returns:
            VolumeHandle if a volume matches, None otherwise
        """
        pass

    @abstractmethod
    def set_drive_letter(self, volume: VolumeHandle, drive_letter: Optional[str]) -> None:
        """Assign drive_letter ("E:") to the volume, or clear it when None.

        Raises:
            CollaboratorError: If the OS rejects the change
        """
        pass


class DiskImageProber(ABC):
    """Detects mounted disk images (ISO/VHD) behind a device path."""

    @abstractmethod
    def probe_virtual_disk(self, device_path: str) -> ProbeResult:
        """Probe device_path for a virtual disk descriptor.

        Returns:
            ProbeResult.virtual_disk() when an image backs the device,
            ProbeResult.not_virtual_disk() for physical media,
            ProbeResult.error(detail) for anything else
        """
        pass


class WindowsHost(OpticalDriveEnumerator, VolumeStore, DiskImageProber):
    """A backend providing all three collaborators."""
