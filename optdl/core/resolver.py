"""Positional disk id resolution."""
from __future__ import annotations

from typing import List, Optional, Union

from optdl.core.drive_letter import parse_disk_id, try_normalize_drive_letter
from optdl.core.logger import get_logger
from optdl.core.management_filter import ManagementDecision, ManagementFilter
from optdl.core.messages import MessageBundle, default_messages
from optdl.models.disk import ManagedDiskInfo
from optdl.services.windows.base import OpticalDriveEnumerator

logger = get_logger(__name__)


class DriveResolver:
    """Maps a 1-based disk id to a manageable optical drive.

    Disk ids index the *filtered* enumeration: drives backed by mounted
    images are dropped before counting, so the first physical drive is
    always disk 1. The OS does not guarantee a stable enumeration order and
    nothing is cached, so every call enumerates again.
    """

    def __init__(
        self,
        enumerator: OpticalDriveEnumerator,
        management_filter: ManagementFilter,
        messages: Optional[MessageBundle] = None,
    ):
        self.enumerator = enumerator
        self.filter = management_filter
        self.messages = messages or default_messages()

    def scan(self) -> List[ManagementDecision]:
        """Evaluate every enumerated optical drive, in enumeration order."""
        records = self.enumerator.list_optical_drives() or []
        return [self.filter.evaluate(record) for record in records]

    def resolve(self, disk_id: Union[str, int]) -> ManagedDiskInfo:
        """Resolve disk_id against a fresh enumeration.

        Raises:
            InvalidArgumentError: If disk_id is not a positive integer
            DiskImageProbeError: If probing any drive fails unexpectedly
        """
        index = parse_disk_id(disk_id, self.messages) - 1
        disk_id = str(index + 1)

        logger.debug(self.messages.format("enumerating_optical_drives", disk_id=disk_id))
        decisions = self.scan()
        managed = [decision for decision in decisions if decision.manageable]
        logger.debug(
            self.messages.format(
                "optical_drives_enumerated", total=len(decisions), managed=len(managed)
            )
        )

        diagnostics = [diag for decision in decisions for diag in decision.diagnostics]

        if index >= len(managed):
            logger.debug(self.messages.format("optical_disk_not_found", disk_id=disk_id))
            return ManagedDiskInfo(disk_id=disk_id, diagnostics=diagnostics)

        drive = managed[index].record.drive
        drive_letter = try_normalize_drive_letter(drive)
        if drive_letter:
            logger.debug(
                self.messages.format(
                    "optical_disk_has_letter", disk_id=disk_id, drive_letter=drive_letter
                )
            )
            return ManagedDiskInfo(
                disk_id=disk_id,
                drive_letter=drive_letter,
                device_id=drive,
                diagnostics=diagnostics,
            )

        logger.debug(self.messages.format("optical_disk_has_no_letter", disk_id=disk_id))
        return ManagedDiskInfo(disk_id=disk_id, device_id=drive, diagnostics=diagnostics)
