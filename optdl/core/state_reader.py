"""Projection of resolved disk info into observable state."""
from typing import Union

from optdl.core.resolver import DriveResolver
from optdl.models.disk import DiskState, Ensure, ManagedDiskInfo


class StateReader:
    """Reports whether a drive letter is currently present on a disk."""

    def __init__(self, resolver: DriveResolver):
        self.resolver = resolver

    def read(self, disk_id: Union[str, int]) -> DiskState:
        return self.project(self.resolver.resolve(disk_id))

    @staticmethod
    def project(info: ManagedDiskInfo) -> DiskState:
        diagnostics = tuple(info.diagnostics)
        # A missing disk and a disk without a letter both read as Absent
        if info.exists and info.has_letter:
            return DiskState(
                disk_id=info.disk_id,
                drive_letter=info.drive_letter,
                ensure=Ensure.PRESENT,
                diagnostics=diagnostics,
            )
        return DiskState(disk_id=info.disk_id, drive_letter="", ensure=Ensure.ABSENT, diagnostics=diagnostics)
