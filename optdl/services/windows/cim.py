"""Windows backend built on CIM queries through PowerShell.

Optical drives come from Win32_CDROMDrive, volumes from Win32_Volume and
mounted images from Get-DiskImage.
"""
from typing import Any, Dict, List, Optional

from optdl.core.errors import CollaboratorError
from optdl.core.logger import get_logger
from optdl.models.disk import OpticalDriveRecord, ProbeResult, VolumeHandle
from optdl.services.windows.base import WindowsHost
from optdl.services.windows.powershell import PowerShellRunner, quote

logger = get_logger(__name__)

# ERROR_VIRTDISK_NOT_VIRTUAL_DISK: "The specified disk is not a virtual disk."
HRESULT_NOT_VIRTUAL_DISK = "0xc03a0015"

VOLUME_FIELDS = "DeviceID, DriveLetter, Label"


def wql_string(value: str) -> str:
    """Escape value for use inside a single-quoted WQL literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def classify_probe_error(payload: Dict[str, Any]) -> ProbeResult:
    """Map a Get-DiskImage failure payload to a ProbeResult."""
    codes = " ".join(
        str(payload.get(key) or "") for key in ("HResult", "ErrorId")
    ).lower()
    if HRESULT_NOT_VIRTUAL_DISK in codes:
        return ProbeResult.not_virtual_disk()

    detail = str(payload.get("Message") or payload.get("ErrorId") or "unknown error").strip()
    return ProbeResult.error(detail)


class CimHost(WindowsHost):
    """Queries and mutates the local Windows host."""

    def __init__(self, runner: Optional[PowerShellRunner] = None):
        self.runner = runner or PowerShellRunner()

    def list_optical_drives(self) -> List[OpticalDriveRecord]:
        script = (
            "Get-CimInstance -ClassName Win32_CDROMDrive | "
            "Select-Object Drive, Caption, DeviceID | "
            "ConvertTo-Json -Compress"
        )
        return [
            OpticalDriveRecord(
                drive=str(item.get("Drive") or ""),
                caption=str(item.get("Caption") or ""),
                device_id=str(item.get("DeviceID") or ""),
            )
            for item in self.runner.run_json(script)
        ]

    def find_volume(
        self,
        drive_letter: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> Optional[VolumeHandle]:
        wql_filter = self._volume_filter(drive_letter, device_id)
        script = (
            f"Get-CimInstance -ClassName Win32_Volume -Filter {quote(wql_filter)} | "
            f"Select-Object {VOLUME_FIELDS} | "
            "ConvertTo-Json -Compress"
        )
        volumes = self.runner.run_json(script)
        if not volumes:
            return None
        if len(volumes) > 1:
            logger.warning(f"Multiple volumes match {wql_filter}; using the first")

        volume = volumes[0]
        return VolumeHandle(
            device_id=str(volume.get("DeviceID") or ""),
            drive_letter=str(volume.get("DriveLetter") or ""),
            label=str(volume.get("Label") or ""),
        )

    def set_drive_letter(self, volume: VolumeHandle, drive_letter: Optional[str]) -> None:
        wql_filter = self._volume_filter(None, volume.device_id)
        value = quote(drive_letter) if drive_letter else "$null"
        script = (
            f"$volume = Get-CimInstance -ClassName Win32_Volume -Filter {quote(wql_filter)}; "
            f"if ($null -eq $volume) {{ throw {quote('Volume not found: ' + volume.device_id)} }}; "
            f"$volume | Set-CimInstance -Property @{{ DriveLetter = {value} }} -ErrorAction Stop"
        )
        self.runner.run(script)
        logger.debug(f"Drive letter of {volume.device_id} set to {drive_letter or 'none'}")

    def probe_virtual_disk(self, device_path: str) -> ProbeResult:
        script = (
            "try { "
            f"$image = Get-DiskImage -DevicePath {quote(device_path)} -ErrorAction Stop; "
            "[pscustomobject]@{ Status = 'VirtualDisk'; ImagePath = $image.ImagePath } "
            "| ConvertTo-Json -Compress "
            "} catch { "
            "[pscustomobject]@{ Status = 'Error'; "
            "HResult = ('0x{0:x8}' -f $_.Exception.HResult); "
            "ErrorId = $_.FullyQualifiedErrorId; "
            "Message = $_.Exception.Message } "
            "| ConvertTo-Json -Compress "
            "}"
        )
        try:
            payloads = self.runner.run_json(script)
        except CollaboratorError as e:
            return ProbeResult.error(str(e))

        if not payloads:
            return ProbeResult.error("Get-DiskImage returned no output")

        payload = payloads[0]
        if payload.get("Status") == "VirtualDisk":
            return ProbeResult.virtual_disk(payload.get("ImagePath"))
        return classify_probe_error(payload)

    @staticmethod
    def _volume_filter(drive_letter: Optional[str], device_id: Optional[str]) -> str:
        if bool(drive_letter) == bool(device_id):
            raise ValueError("Exactly one of drive_letter or device_id is required")
        if drive_letter:
            return f"DriveLetter = '{wql_string(drive_letter)}'"
        return f"DeviceID = '{wql_string(device_id)}'"
