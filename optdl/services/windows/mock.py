"""In-memory Windows host for tests, demos and dry runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml

from optdl.core.drive_letter import try_normalize_drive_letter
from optdl.core.errors import CollaboratorError
from optdl.core.logger import get_logger
from optdl.models.disk import OpticalDriveRecord, ProbeResult, VolumeHandle
from optdl.services.windows.base import WindowsHost

logger = get_logger(__name__)


@dataclass
class MockVolume:
    device_id: str
    drive_letter: str = ""
    label: str = ""


@dataclass
class MockOpticalDrive:
    """An optical drive, either bound to a volume or carrying a fixed token."""
    volume_id: Optional[str] = None
    drive: str = ""
    caption: str = "Mock DVD-ROM"
    device_id: str = ""


def _path_key(device_path: str) -> str:
    return device_path.rstrip("\\").lower()


def volume_guid(index: int) -> str:
    """Deterministic \\\\?\\Volume{GUID}\\ path for mock volumes."""
    return f"\\\\?\\Volume{{00000000-0000-0000-0000-{index:012d}}}\\"


@dataclass
class MockHost(WindowsHost):
    """Simulates Win32_CDROMDrive, Win32_Volume and Get-DiskImage.

    A drive bound to a volume reports the volume's current letter, or the
    volume GUID path when the volume has none, like Win32_CDROMDrive does.
    """

    volumes: List[MockVolume] = field(default_factory=list)
    drives: List[MockOpticalDrive] = field(default_factory=list)
    images: Dict[str, str] = field(default_factory=dict)
    probe_errors: Dict[str, str] = field(default_factory=dict)
    mutations: List[Tuple[str, Optional[str]]] = field(default_factory=list)

    # ---------------- builders ----------------

    def add_volume(self, drive_letter: str = "", label: str = "", device_id: Optional[str] = None) -> MockVolume:
        volume = MockVolume(
            device_id=device_id or volume_guid(len(self.volumes) + 1),
            drive_letter=try_normalize_drive_letter(drive_letter) or "",
            label=label,
        )
        self.volumes.append(volume)
        return volume

    def add_optical_drive(
        self,
        drive_letter: str = "",
        caption: str = "Mock DVD-ROM",
        image_path: Optional[str] = None,
    ) -> MockVolume:
        """Add an optical drive backed by a new volume.

        Args:
            drive_letter: Letter of the drive, empty for no letter
            image_path: When set, the drive is a mounted image of this file
        """
        volume = self.add_volume(drive_letter=drive_letter, label=caption)
        self.drives.append(
            MockOpticalDrive(
                volume_id=volume.device_id,
                caption=caption,
                device_id=f"IDE\\CDROM{len(self.drives)}",
            )
        )
        if image_path:
            self.images[_path_key(volume.device_id)] = image_path
        return volume

    @classmethod
    def from_dict(cls, data: Dict) -> "MockHost":
        host = cls()
        for item in data.get("volumes") or []:
            host.add_volume(
                drive_letter=str(item.get("drive_letter") or ""),
                label=str(item.get("label") or ""),
                device_id=item.get("device_id"),
            )
        for item in data.get("optical_drives") or []:
            if item.get("volume"):
                host.drives.append(
                    MockOpticalDrive(
                        volume_id=item["volume"],
                        caption=str(item.get("caption") or "Mock DVD-ROM"),
                    )
                )
            elif item.get("drive"):
                host.drives.append(
                    MockOpticalDrive(drive=str(item["drive"]), caption=str(item.get("caption") or "Mock DVD-ROM"))
                )
            else:
                volume = host.add_optical_drive(
                    drive_letter=str(item.get("drive_letter") or ""),
                    caption=str(item.get("caption") or "Mock DVD-ROM"),
                    image_path=item.get("image_path"),
                )
                logger.debug(f"Mock optical drive bound to {volume.device_id}")
        for device_path, image_path in (data.get("images") or {}).items():
            host.images[_path_key(device_path)] = image_path
        for device_path, detail in (data.get("probe_errors") or {}).items():
            host.probe_errors[_path_key(device_path)] = detail
        return host

    @classmethod
    def from_yaml(cls, path: str) -> "MockHost":
        state_path = Path(path)
        if not state_path.exists():
            raise FileNotFoundError(f"Mock host state not found: {state_path}")
        with open(state_path) as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    @classmethod
    def demo(cls) -> "MockHost":
        """A physical DVD drive as D: and a mounted ISO as E:."""
        host = cls()
        host.add_volume(drive_letter="C:", label="System")
        host.add_optical_drive(drive_letter="D:", caption="HL-DT-ST DVD+-RW GHB0N")
        host.add_optical_drive(
            drive_letter="E:",
            caption="Microsoft Virtual DVD-ROM",
            image_path="C:\\images\\install.iso",
        )
        return host

    # ---------------- collaborators ----------------

    def list_optical_drives(self) -> List[OpticalDriveRecord]:
        records = []
        for drive in self.drives:
            if drive.volume_id:
                volume = self._volume_by_id(drive.volume_id)
                token = volume.drive_letter or volume.device_id
            else:
                token = drive.drive
            records.append(OpticalDriveRecord(drive=token, caption=drive.caption, device_id=drive.device_id))
        return records

    def find_volume(
        self,
        drive_letter: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> Optional[VolumeHandle]:
        if bool(drive_letter) == bool(device_id):
            raise ValueError("Exactly one of drive_letter or device_id is required")

        for volume in self.volumes:
            if drive_letter and volume.drive_letter.upper() == drive_letter.upper():
                return self._handle(volume)
            if device_id and _path_key(volume.device_id) == _path_key(device_id):
                return self._handle(volume)
        return None

    def set_drive_letter(self, volume: VolumeHandle, drive_letter: Optional[str]) -> None:
        target = self._volume_by_id(volume.device_id)
        if drive_letter:
            for other in self.volumes:
                if other is not target and other.drive_letter.upper() == drive_letter.upper():
                    raise CollaboratorError(
                        f"Drive letter {drive_letter} is already in use by {other.device_id}"
                    )
        target.drive_letter = drive_letter.upper() if drive_letter else ""
        self.mutations.append((target.device_id, drive_letter))
        logger.debug(f"MOCK: drive letter of {target.device_id} set to {drive_letter or 'none'}")

    def probe_virtual_disk(self, device_path: str) -> ProbeResult:
        key = _path_key(device_path)
        if key in self.probe_errors:
            return ProbeResult.error(self.probe_errors[key])
        if key in self.images:
            return ProbeResult.virtual_disk(self.images[key])
        return ProbeResult.not_virtual_disk()

    # ---------------- helpers ----------------

    def _volume_by_id(self, device_id: Optional[str]) -> MockVolume:
        for volume in self.volumes:
            if device_id and _path_key(volume.device_id) == _path_key(device_id):
                return volume
        raise CollaboratorError(f"Volume not found: {device_id}")

    @staticmethod
    def _handle(volume: MockVolume) -> VolumeHandle:
        return VolumeHandle(device_id=volume.device_id, drive_letter=volume.drive_letter, label=volume.label)
