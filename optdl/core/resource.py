"""The OpticalDiskDriveLetter resource: Get, Test and Set verbs."""
from __future__ import annotations

from typing import List, Optional, Union

from optdl.core.config import OptdlConfig, get_config
from optdl.core.drive_letter import assert_drive_letter_valid, parse_ensure
from optdl.core.management_filter import ManagementDecision, ManagementFilter
from optdl.core.messages import MessageBundle
from optdl.core.reconciler import Reconciler, ReconciliationPolicy
from optdl.core.resolver import DriveResolver
from optdl.core.state_reader import StateReader
from optdl.models.disk import DesiredState, DiskState, Ensure
from optdl.services.windows.base import WindowsHost


class OpticalDiskDriveLetter:
    """Declarative resource managing the drive letter of an optical disk.

    Wires the filter, resolver, state reader and reconciler around a single
    host backend. Holds no disk state between calls.
    """

    def __init__(
        self,
        host: WindowsHost,
        messages: Optional[MessageBundle] = None,
        policy: Optional[ReconciliationPolicy] = None,
    ):
        self.host = host
        self.messages = messages or MessageBundle.load()
        self.filter = ManagementFilter(host, host, self.messages)
        self.resolver = DriveResolver(host, self.filter, self.messages)
        self.reader = StateReader(self.resolver)
        self.reconciler = Reconciler(self.resolver, host, self.messages, policy)

    @classmethod
    def from_config(cls, config: Optional[OptdlConfig] = None) -> "OpticalDiskDriveLetter":
        """Build the resource against the backend selected by config."""
        from optdl.services.windows import create_host

        config = config or get_config()
        return cls(
            create_host(config),
            messages=MessageBundle.load(config.locale),
            policy=ReconciliationPolicy(verify_before_set=config.verify_before_set),
        )

    def get_state(self, disk_id: Union[str, int], drive_letter: Optional[str] = None) -> DiskState:
        """Return the current state of disk_id.

        drive_letter is validated when given but does not influence the result.
        """
        if drive_letter:
            assert_drive_letter_valid(drive_letter, messages=self.messages)
        return self.reader.read(disk_id)

    def test_state(
        self,
        disk_id: Union[str, int],
        drive_letter: str,
        ensure: Union[str, Ensure, None] = Ensure.PRESENT,
    ) -> bool:
        return self.reconciler.test(self._desired(disk_id, drive_letter, ensure))

    def set_state(
        self,
        disk_id: Union[str, int],
        drive_letter: str,
        ensure: Union[str, Ensure, None] = Ensure.PRESENT,
    ) -> None:
        self.reconciler.set(self._desired(disk_id, drive_letter, ensure))

    def list_drives(self) -> List[ManagementDecision]:
        """Evaluate all optical drives, managed or not."""
        return self.resolver.scan()

    def _desired(self, disk_id, drive_letter, ensure) -> DesiredState:
        return DesiredState(
            disk_id=str(disk_id),
            drive_letter=drive_letter,
            ensure=parse_ensure(ensure, self.messages),
        )
