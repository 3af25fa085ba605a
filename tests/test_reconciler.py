"""Tests for the Reconciler test/set verbs."""
import pytest

from optdl.core.errors import (
    CollaboratorError,
    InvalidArgumentError,
    InvalidTargetError,
    LetterConflictError,
    VolumeNotFoundError,
)
from optdl.core.management_filter import ManagementFilter
from optdl.core.reconciler import Reconciler, ReconciliationPolicy
from optdl.core.resolver import DriveResolver
from optdl.core.state_reader import StateReader
from optdl.models.disk import DesiredState, Ensure, OpticalDriveRecord
from optdl.services.windows.mock import MockHost


def make_reconciler(host, messages, policy=None):
    resolver = DriveResolver(host, ManagementFilter(host, host, messages), messages)
    return Reconciler(resolver, host, messages, policy), StateReader(resolver)


def test_assign_letter_to_disk_without_letter(host, messages):
    host.add_optical_drive()
    reconciler, reader = make_reconciler(host, messages)
    desired = DesiredState(disk_id="1", drive_letter="F:")

    assert reconciler.test(desired) is False
    reconciler.set(desired)

    assert reconciler.test(desired) is True
    assert reader.read("1").drive_letter == "F:"
    assert len(host.mutations) == 1


def test_change_existing_letter(host, messages):
    host.add_optical_drive(drive_letter="D:")
    reconciler, reader = make_reconciler(host, messages)
    desired = DesiredState(disk_id="1", drive_letter="x")

    assert reconciler.test(desired) is False
    reconciler.set(desired)

    assert reader.read("1").drive_letter == "X:"
    assert reconciler.test(desired) is True


def test_matching_letter_is_in_desired_state(host, messages):
    host.add_optical_drive(drive_letter="D:")
    reconciler, _ = make_reconciler(host, messages)

    assert reconciler.test(DesiredState(disk_id="1", drive_letter="d")) is True


def test_missing_disk_present_raises_invalid_target(physical_and_image_host, messages):
    reconciler, _ = make_reconciler(physical_and_image_host, messages)

    with pytest.raises(InvalidTargetError) as exc:
        reconciler.test(DesiredState(disk_id="2", drive_letter="X"))

    assert exc.value.disk_id == "2"
    assert "Optical disk 2 does not exist" in str(exc.value)


def test_missing_disk_absent_is_in_desired_state(physical_and_image_host, messages):
    reconciler, _ = make_reconciler(physical_and_image_host, messages)

    assert reconciler.test(DesiredState(disk_id="2", drive_letter="X", ensure=Ensure.ABSENT)) is True


def test_letter_owned_by_other_volume_raises_conflict(host, messages):
    host.add_optical_drive(drive_letter="G:")
    host.add_volume(drive_letter="H:", label="Data")
    reconciler, _ = make_reconciler(host, messages)

    with pytest.raises(LetterConflictError) as exc:
        reconciler.test(DesiredState(disk_id="1", drive_letter="H:"))

    assert exc.value.drive_letter == "H:"
    assert exc.value.disk_id == "1"
    assert host.mutations == []


def test_letter_owned_by_mounted_image_raises_conflict(physical_and_image_host, messages):
    reconciler, _ = make_reconciler(physical_and_image_host, messages)

    with pytest.raises(LetterConflictError):
        reconciler.test(DesiredState(disk_id="1", drive_letter="E"))


def test_remove_letter(host, messages):
    host.add_optical_drive(drive_letter="G:")
    reconciler, reader = make_reconciler(host, messages)
    desired = DesiredState(disk_id="1", drive_letter="G", ensure=Ensure.ABSENT)

    assert reconciler.test(desired) is False
    reconciler.set(desired)

    state = reader.read("1")
    assert state.ensure is Ensure.ABSENT
    assert state.drive_letter == ""
    assert reconciler.test(desired) is True


def test_absent_for_disk_without_letter_is_in_desired_state(host, messages):
    host.add_optical_drive()
    reconciler, _ = make_reconciler(host, messages)

    assert reconciler.test(DesiredState(disk_id="1", drive_letter="G", ensure=Ensure.ABSENT)) is True


def test_set_then_remove_round_trip(host, messages):
    host.add_optical_drive()
    reconciler, reader = make_reconciler(host, messages)

    reconciler.set(DesiredState(disk_id="1", drive_letter="E:"))
    assert reader.read("1").drive_letter == "E:"

    reconciler.set(DesiredState(disk_id="1", drive_letter="E", ensure=Ensure.ABSENT))
    assert reader.read("1").ensure is Ensure.ABSENT


def test_set_absent_on_missing_disk_does_nothing(host, messages):
    reconciler, _ = make_reconciler(host, messages)

    reconciler.set(DesiredState(disk_id="1", drive_letter="E", ensure=Ensure.ABSENT))

    assert host.mutations == []


def test_set_present_on_missing_disk_surfaces_volume_not_found(host, messages):
    reconciler, _ = make_reconciler(host, messages)

    with pytest.raises(VolumeNotFoundError) as exc:
        reconciler.set(DesiredState(disk_id="1", drive_letter="E"))

    assert exc.value.disk_id == "1"


def test_set_does_not_precheck_conflicts(host, messages):
    host.add_optical_drive(drive_letter="G:")
    host.add_volume(drive_letter="H:")
    reconciler, _ = make_reconciler(host, messages)

    # The OS rejects the duplicate letter; the error surfaces unchanged
    with pytest.raises(CollaboratorError) as exc:
        reconciler.set(DesiredState(disk_id="1", drive_letter="H"))

    assert not isinstance(exc.value, LetterConflictError)
    assert host.mutations == []


def test_verify_before_set_reports_conflict(host, messages):
    host.add_optical_drive(drive_letter="G:")
    host.add_volume(drive_letter="H:")
    reconciler, _ = make_reconciler(host, messages, ReconciliationPolicy(verify_before_set=True))

    with pytest.raises(LetterConflictError):
        reconciler.set(DesiredState(disk_id="1", drive_letter="H"))


def test_verify_before_set_allows_free_letter(host, messages):
    host.add_optical_drive(drive_letter="G:")
    reconciler, reader = make_reconciler(host, messages, ReconciliationPolicy(verify_before_set=True))

    reconciler.set(DesiredState(disk_id="1", drive_letter="J"))

    assert reader.read("1").drive_letter == "J:"


def test_test_then_set_is_not_atomic(host, messages):
    host.add_optical_drive(drive_letter="G:")
    reconciler, _ = make_reconciler(host, messages)
    desired = DesiredState(disk_id="1", drive_letter="H")

    assert reconciler.test(desired) is False
    # Another tool grabs H: between test and set
    host.add_volume(drive_letter="H:")

    with pytest.raises(CollaboratorError):
        reconciler.set(desired)


def test_invalid_desired_letter_is_rejected(host, messages):
    host.add_optical_drive(drive_letter="G:")
    reconciler, _ = make_reconciler(host, messages)

    with pytest.raises(InvalidArgumentError):
        reconciler.test(DesiredState(disk_id="1", drive_letter="GH"))
    with pytest.raises(InvalidArgumentError):
        reconciler.set(DesiredState(disk_id="1", drive_letter="7"))


def test_mounted_image_is_never_touched(messages):
    host = MockHost()
    image_volume = host.add_optical_drive(drive_letter="E:", image_path="C:\\iso\\a.iso")
    host.add_optical_drive()
    reconciler, reader = make_reconciler(host, messages)

    reconciler.set(DesiredState(disk_id="1", drive_letter="R"))

    assert image_volume.drive_letter == "E:"
    assert reader.read("1").drive_letter == "R:"


def test_verify_before_set_accepts_letter_already_on_own_volume(host, messages, monkeypatch):
    volume = host.add_optical_drive()
    # Enumeration still reports the volume path, without its trailing backslash,
    # after the volume itself already received X:
    stale = [OpticalDriveRecord(drive=volume.device_id.rstrip("\\"), caption="Mock DVD-ROM")]
    volume.drive_letter = "X:"
    monkeypatch.setattr(host, "list_optical_drives", lambda: stale)
    reconciler, _ = make_reconciler(host, messages, ReconciliationPolicy(verify_before_set=True))

    reconciler.set(DesiredState(disk_id="1", drive_letter="X"))

    assert host.mutations == [(volume.device_id, "X:")]
