"""Decides which optical drives optdl is allowed to manage.

Optical drives that expose a mounted ISO or VHD belong to the disk-image
tooling, so they are excluded here. The filter fails closed: a drive whose
volume cannot be resolved is never managed.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from optdl.core.drive_letter import is_volume_guid_path, try_normalize_drive_letter
from optdl.core.errors import DiskImageProbeError
from optdl.core.logger import get_logger
from optdl.core.messages import MessageBundle, default_messages
from optdl.models.disk import (
    Diagnostic,
    DiagnosticSeverity,
    OpticalDriveRecord,
    ProbeOutcome,
)
from optdl.services.windows.base import DiskImageProber, VolumeStore

logger = get_logger(__name__)


@dataclass
class ManagementDecision:
    """Outcome of evaluating one optical drive record."""

    record: OpticalDriveRecord
    manageable: bool
    device_path: Optional[str] = None
    reason: str = ""
    diagnostics: List[Diagnostic] = field(default_factory=list)


class ManagementFilter:
    """Excludes optical drives backed by mounted disk images."""

    def __init__(
        self,
        volumes: VolumeStore,
        prober: DiskImageProber,
        messages: Optional[MessageBundle] = None,
    ):
        self.volumes = volumes
        self.prober = prober
        self.messages = messages or default_messages()

    def can_manage(self, record: OpticalDriveRecord) -> bool:
        """Return True when record is a physical optical drive.

        Raises:
            DiskImageProbeError: If the disk-image probe fails unexpectedly
        """
        return self.evaluate(record).manageable

    def evaluate(self, record: OpticalDriveRecord) -> ManagementDecision:
        """Evaluate record and explain the decision."""
        device_path = self._resolve_device_path(record)
        if device_path is None:
            message = self.messages.format("volume_not_found_for_drive", drive=record.drive)
            logger.warning(message)
            return ManagementDecision(
                record=record,
                manageable=False,
                reason="volume-not-found",
                diagnostics=[
                    Diagnostic(
                        severity=DiagnosticSeverity.WARNING,
                        key="volume_not_found_for_drive",
                        message=message,
                        subject=record.drive,
                    )
                ],
            )

        result = self.prober.probe_virtual_disk(device_path)

        if result.outcome == ProbeOutcome.VIRTUAL_DISK:
            message = self.messages.format(
                "optical_drive_is_mounted_image", drive=record.drive, device_path=device_path
            )
            logger.debug(message)
            return ManagementDecision(
                record=record,
                manageable=False,
                device_path=device_path,
                reason="mounted-image",
                diagnostics=[
                    Diagnostic(
                        severity=DiagnosticSeverity.INFO,
                        key="optical_drive_is_mounted_image",
                        message=message,
                        subject=record.drive,
                    )
                ],
            )

        if result.outcome == ProbeOutcome.NOT_VIRTUAL_DISK:
            logger.debug(
                self.messages.format(
                    "optical_drive_can_be_managed", drive=record.drive, device_path=device_path
                )
            )
            return ManagementDecision(record=record, manageable=True, device_path=device_path)

        raise DiskImageProbeError(
            self.messages.format(
                "disk_image_probe_failed",
                drive=record.drive,
                device_path=device_path,
                detail=result.detail,
            ),
            device_path=device_path,
            detail=result.detail,
        )

    def _resolve_device_path(self, record: OpticalDriveRecord) -> Optional[str]:
        """Return the device path to probe, or None if no volume backs the drive."""
        if is_volume_guid_path(record.drive):
            return record.drive.rstrip("\\")

        drive_letter = try_normalize_drive_letter(record.drive)
        if drive_letter is None:
            return None

        volume = self.volumes.find_volume(drive_letter=drive_letter)
        if volume is None or not volume.device_id:
            return None
        return volume.device_id.rstrip("\\")
