"""Drive letter reconciliation: compare desired state and converge."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from optdl.core.drive_letter import assert_drive_letter_valid, is_volume_guid_path, parse_ensure
from optdl.core.errors import InvalidTargetError, LetterConflictError, VolumeNotFoundError
from optdl.core.logger import get_logger
from optdl.core.messages import MessageBundle, default_messages
from optdl.core.resolver import DriveResolver
from optdl.models.disk import DesiredState, Ensure, ManagedDiskInfo, VolumeHandle
from optdl.services.windows.base import VolumeStore

logger = get_logger(__name__)


@dataclass
class ReconciliationPolicy:
    """Options for converging drive letters."""

    # Re-check that the desired letter is still free immediately before
    # mutating. Narrows the window between test() and set(), does not close it.
    verify_before_set: bool = False


class Reconciler:
    """Compares and converges the drive letter of one optical disk.

    ``test`` is read-only. ``set`` mutates unconditionally given a located
    volume; callers are expected to run ``test`` first. Neither is atomic
    with respect to other tools changing drive letters in between.
    """

    def __init__(
        self,
        resolver: DriveResolver,
        volumes: VolumeStore,
        messages: Optional[MessageBundle] = None,
        policy: Optional[ReconciliationPolicy] = None,
    ):
        self.resolver = resolver
        self.volumes = volumes
        self.messages = messages or default_messages()
        self.policy = policy or ReconciliationPolicy()

    def test(self, desired: DesiredState) -> bool:
        """Return True when the disk is already in the desired state.

        Raises:
            InvalidTargetError: If Present is requested for a missing disk
            LetterConflictError: If the desired letter belongs to another volume
        """
        drive_letter = assert_drive_letter_valid(desired.drive_letter, colon=True, messages=self.messages)
        ensure = parse_ensure(desired.ensure, self.messages)
        info = self.resolver.resolve(desired.disk_id)

        logger.debug(
            self.messages.format(
                "testing_drive_letter",
                disk_id=info.disk_id,
                drive_letter=drive_letter,
                ensure=ensure.value,
            )
        )

        if ensure == Ensure.ABSENT:
            if info.has_letter:
                logger.info(
                    self.messages.format(
                        "drive_letter_should_be_removed",
                        disk_id=info.disk_id,
                        current=info.drive_letter,
                    )
                )
                return False
            logger.debug(self.messages.format("drive_letter_absent_ok", disk_id=info.disk_id))
            return True

        if not info.exists:
            raise InvalidTargetError(
                self.messages.format(
                    "optical_disk_not_present_error",
                    disk_id=info.disk_id,
                    drive_letter=drive_letter,
                ),
                disk_id=info.disk_id,
            )

        if info.drive_letter == drive_letter:
            logger.debug(
                self.messages.format(
                    "drive_letter_matches", disk_id=info.disk_id, drive_letter=drive_letter
                )
            )
            return True

        self._assert_letter_free(drive_letter, info)

        if info.has_letter:
            logger.info(
                self.messages.format(
                    "drive_letter_mismatch",
                    disk_id=info.disk_id,
                    current=info.drive_letter,
                    drive_letter=drive_letter,
                )
            )
        else:
            logger.info(
                self.messages.format(
                    "drive_letter_unassigned_mismatch",
                    disk_id=info.disk_id,
                    drive_letter=drive_letter,
                )
            )
        return False

    def set(self, desired: DesiredState) -> None:
        """Converge the disk to the desired state with a single mutation.

        Raises:
            VolumeNotFoundError: If the disk's volume cannot be located
            LetterConflictError: Only with verify_before_set, if the letter is taken
            CollaboratorError: If the OS rejects the change
        """
        drive_letter = assert_drive_letter_valid(desired.drive_letter, colon=True, messages=self.messages)
        ensure = parse_ensure(desired.ensure, self.messages)
        info = self.resolver.resolve(desired.disk_id)

        if ensure == Ensure.ABSENT and not info.exists:
            logger.info(self.messages.format("nothing_to_remove", disk_id=info.disk_id))
            return

        volume = self._locate_volume(info)

        if ensure == Ensure.ABSENT:
            logger.info(
                self.messages.format(
                    "removing_drive_letter",
                    disk_id=info.disk_id,
                    current=info.drive_letter or volume.drive_letter or "-",
                )
            )
            self.volumes.set_drive_letter(volume, None)
            return

        if self.policy.verify_before_set and info.drive_letter != drive_letter:
            logger.debug(
                self.messages.format(
                    "verifying_drive_letter_owner", disk_id=info.disk_id, drive_letter=drive_letter
                )
            )
            self._assert_letter_free(drive_letter, info, volume)

        logger.info(
            self.messages.format("setting_drive_letter", disk_id=info.disk_id, drive_letter=drive_letter)
        )
        self.volumes.set_drive_letter(volume, drive_letter)

    def _locate_volume(self, info: ManagedDiskInfo) -> VolumeHandle:
        if info.has_letter:
            volume = self.volumes.find_volume(drive_letter=info.drive_letter)
        elif info.exists:
            volume = self.volumes.find_volume(device_id=info.device_id)
        else:
            volume = None

        if volume is None:
            raise VolumeNotFoundError(
                self.messages.format("volume_not_found_for_disk_error", disk_id=info.disk_id),
                disk_id=info.disk_id,
                device_id=info.device_id,
            )
        return volume

    def _assert_letter_free(
        self,
        drive_letter: str,
        info: ManagedDiskInfo,
        volume: Optional[VolumeHandle] = None,
    ) -> None:
        """Raise LetterConflictError when drive_letter belongs to another volume.

        The owner is compared with the disk's own volume: the located volume
        when given, otherwise the volume path an unlettered disk enumerates as.
        A lettered disk enumerates as its letter, which cannot name the owner.
        """
        owner = self.volumes.find_volume(drive_letter=drive_letter)
        if owner is None:
            return
        if volume is not None:
            own_path = volume.device_id
        elif is_volume_guid_path(info.device_id):
            own_path = info.device_id
        else:
            own_path = ""
        if own_path and _same_volume(owner.device_id, own_path):
            return
        raise LetterConflictError(
            self.messages.format(
                "drive_letter_in_use_error", drive_letter=drive_letter, disk_id=info.disk_id
            ),
            drive_letter=drive_letter,
            disk_id=info.disk_id,
        )


def _same_volume(left: str, right: str) -> bool:
    return left.rstrip("\\").lower() == right.rstrip("\\").lower()
