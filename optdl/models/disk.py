"""Optical disk and volume models."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Ensure(Enum):
    """Whether a drive letter should exist on the disk."""
    PRESENT = "Present"
    ABSENT = "Absent"

    def __str__(self) -> str:
        return self.value


class DiagnosticSeverity:
    """Severity levels for soft (non-fatal) conditions."""

    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A soft condition observed while reading state.

    Diagnostics never interrupt the caller. They are logged and carried
    alongside the result so callers can surface them.
    """

    severity: str
    key: str
    message: str
    subject: str = ""


@dataclass(frozen=True)
class OpticalDriveRecord:
    """One optical drive as reported by the OS device enumeration."""
    drive: str                  # "D:" or "\\?\Volume{GUID}\" when no letter
    caption: str = ""           # "HL-DT-ST DVD+-RW GHB0N"
    device_id: str = ""         # PnP device id, display only


@dataclass(frozen=True)
class VolumeHandle:
    """Mutable volume as located through the volume collaborator."""
    device_id: str              # "\\?\Volume{GUID}\"
    drive_letter: str = ""      # "E:" or "" when unassigned
    label: str = ""


@dataclass
class ManagedDiskInfo:
    """Resolved view of one positional disk identifier.

    An empty ``device_id`` means no manageable disk exists at that position.
    A disk without a drive letter keeps its raw volume token in ``device_id``
    so the volume can still be located for mutation.
    """

    disk_id: str
    drive_letter: str = ""
    device_id: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def __post_init__(self):
        if self.drive_letter and not self.device_id:
            raise ValueError(
                f"Disk {self.disk_id} has drive letter {self.drive_letter} but no device id"
            )

    @property
    def exists(self) -> bool:
        return bool(self.device_id)

    @property
    def has_letter(self) -> bool:
        return bool(self.drive_letter)


@dataclass(frozen=True)
class DiskState:
    """Observable state returned by a Get call."""
    disk_id: str
    drive_letter: str
    ensure: Ensure
    # Soft conditions met while resolving; not part of the state itself
    diagnostics: Tuple[Diagnostic, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict:
        return {
            "disk_id": self.disk_id,
            "drive_letter": self.drive_letter,
            "ensure": self.ensure.value,
        }


@dataclass(frozen=True)
class DesiredState:
    """Declared target for one optical disk."""
    disk_id: str
    drive_letter: str
    ensure: Ensure = Ensure.PRESENT


class ProbeOutcome(Enum):
    """Result kinds of a disk-image probe."""
    VIRTUAL_DISK = "virtual-disk"
    NOT_VIRTUAL_DISK = "not-virtual-disk"
    ERROR = "error"


@dataclass(frozen=True)
class ProbeResult:
    """Typed outcome of probing a device path for a mounted disk image."""

    outcome: ProbeOutcome
    detail: str = ""
    image_path: Optional[str] = None

    @classmethod
    def virtual_disk(cls, image_path: Optional[str] = None) -> "ProbeResult":
        return cls(ProbeOutcome.VIRTUAL_DISK, image_path=image_path)

    @classmethod
    def not_virtual_disk(cls) -> "ProbeResult":
        return cls(ProbeOutcome.NOT_VIRTUAL_DISK)

    @classmethod
    def error(cls, detail: str) -> "ProbeResult":
        return cls(ProbeOutcome.ERROR, detail=detail)
