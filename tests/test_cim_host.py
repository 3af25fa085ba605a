"""Tests for the CIM backend using a stubbed PowerShell runner."""
import pytest

from optdl.core.errors import CollaboratorError
from optdl.models.disk import ProbeOutcome, VolumeHandle
from optdl.services.windows.cim import CimHost, classify_probe_error, wql_string

VOLUME = "\\\\?\\Volume{6e5e5d3c-8e6b-11ea-a3a4-806e6f6e6963}\\"


class StubRunner:
    """Records scripts and replays canned JSON payloads."""

    def __init__(self, payloads=None, error=None):
        self.payloads = payloads if payloads is not None else []
        self.error = error
        self.scripts = []

    def run(self, script):
        self.scripts.append(script)
        if self.error:
            raise self.error
        return ""

    def run_json(self, script):
        self.scripts.append(script)
        if self.error:
            raise self.error
        return self.payloads


def test_list_optical_drives_maps_records():
    runner = StubRunner([
        {"Drive": "D:", "Caption": "HL-DT-ST DVD+-RW", "DeviceID": "IDE\\CDROM0"},
        {"Drive": VOLUME, "Caption": None, "DeviceID": "SCSI\\CDROM1"},
    ])

    records = CimHost(runner).list_optical_drives()

    assert "Win32_CDROMDrive" in runner.scripts[0]
    assert [r.drive for r in records] == ["D:", VOLUME]
    assert records[1].caption == ""


def test_find_volume_by_letter_builds_filter():
    runner = StubRunner([{"DeviceID": VOLUME, "DriveLetter": "D:", "Label": "DVD"}])

    volume = CimHost(runner).find_volume(drive_letter="D:")

    assert volume == VolumeHandle(device_id=VOLUME, drive_letter="D:", label="DVD")
    assert "-Filter 'DriveLetter = ''D:'''" in runner.scripts[0]


def test_find_volume_by_device_id_escapes_backslashes():
    runner = StubRunner([])

    assert CimHost(runner).find_volume(device_id=VOLUME) is None
    assert "DeviceID = ''\\\\\\\\?\\\\Volume{" in runner.scripts[0]


def test_find_volume_requires_exactly_one_key():
    with pytest.raises(ValueError):
        CimHost(StubRunner()).find_volume()
    with pytest.raises(ValueError):
        CimHost(StubRunner()).find_volume(drive_letter="D:", device_id=VOLUME)


def test_set_drive_letter_scripts():
    runner = StubRunner()
    host = CimHost(runner)
    volume = VolumeHandle(device_id=VOLUME, drive_letter="D:")

    host.set_drive_letter(volume, "X:")
    host.set_drive_letter(volume, None)

    assert "Set-CimInstance -Property @{ DriveLetter = 'X:' }" in runner.scripts[0]
    assert "Set-CimInstance -Property @{ DriveLetter = $null }" in runner.scripts[1]


def test_set_drive_letter_propagates_os_failure():
    runner = StubRunner(error=CollaboratorError("Access denied"))

    with pytest.raises(CollaboratorError, match="Access denied"):
        CimHost(runner).set_drive_letter(VolumeHandle(device_id=VOLUME), "X:")


def test_probe_virtual_disk():
    runner = StubRunner([{"Status": "VirtualDisk", "ImagePath": "C:\\iso\\a.iso"}])

    result = CimHost(runner).probe_virtual_disk(VOLUME.rstrip("\\"))

    assert result.outcome == ProbeOutcome.VIRTUAL_DISK
    assert result.image_path == "C:\\iso\\a.iso"
    assert "Get-DiskImage -DevicePath" in runner.scripts[0]


def test_probe_not_virtual_disk_by_hresult():
    runner = StubRunner([{
        "Status": "Error",
        "HResult": "0x80131500",
        "ErrorId": "HRESULT 0xc03a0015,Get-DiskImage",
        "Message": "The specified disk is not a virtual disk.",
    }])

    result = CimHost(runner).probe_virtual_disk(VOLUME)

    assert result.outcome == ProbeOutcome.NOT_VIRTUAL_DISK


def test_probe_other_error_is_reported():
    result = classify_probe_error({
        "Status": "Error",
        "HResult": "0x80070005",
        "ErrorId": "HRESULT 0x80070005,Get-DiskImage",
        "Message": "Access is denied.",
    })

    assert result.outcome == ProbeOutcome.ERROR
    assert result.detail == "Access is denied."


def test_probe_runner_failure_is_probe_error():
    runner = StubRunner(error=CollaboratorError("PowerShell command timed out after 60s"))

    result = CimHost(runner).probe_virtual_disk(VOLUME)

    assert result.outcome == ProbeOutcome.ERROR
    assert "timed out" in result.detail


def test_probe_without_output_is_probe_error():
    assert CimHost(StubRunner([])).probe_virtual_disk(VOLUME).outcome == ProbeOutcome.ERROR


def test_wql_string():
    assert wql_string("a\\b'c") == "a\\\\b\\'c"
