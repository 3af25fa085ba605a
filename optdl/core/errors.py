"""Fatal error types raised by optdl operations."""
from typing import Optional


class OptdlError(Exception):
    """Base class for all fatal optdl errors."""


class InvalidArgumentError(OptdlError, ValueError):
    """A disk id, drive letter or ensure value is malformed."""

    def __init__(self, message: str, argument: str = "", value: object = None):
        super().__init__(message)
        self.argument = argument
        self.value = value


class InvalidTargetError(OptdlError):
    """A drive letter was requested for a disk that does not exist."""

    def __init__(self, message: str, disk_id: str):
        super().__init__(message)
        self.disk_id = disk_id


class LetterConflictError(OptdlError):
    """The desired drive letter is already assigned to another volume."""

    def __init__(self, message: str, drive_letter: str, disk_id: str = ""):
        super().__init__(message)
        self.drive_letter = drive_letter
        self.disk_id = disk_id


class DiskImageProbeError(OptdlError):
    """The disk-image probe failed for a reason other than "not a virtual disk"."""

    def __init__(self, message: str, device_path: str, detail: str = ""):
        super().__init__(message)
        self.device_path = device_path
        self.detail = detail


class CollaboratorError(OptdlError):
    """An operating system query or mutation failed."""

    def __init__(self, message: str, command: Optional[str] = None, stderr: str = ""):
        super().__init__(message)
        self.command = command
        self.stderr = stderr


class VolumeNotFoundError(CollaboratorError):
    """The volume to mutate could not be located."""

    def __init__(self, message: str, disk_id: str = "", device_id: str = ""):
        super().__init__(message)
        self.disk_id = disk_id
        self.device_id = device_id
