"""Tests for drive letter and input validation helpers."""
import pytest

from optdl.core.drive_letter import (
    assert_drive_letter_valid,
    is_volume_guid_path,
    parse_disk_id,
    parse_ensure,
    try_normalize_drive_letter,
)
from optdl.core.errors import InvalidArgumentError
from optdl.models.disk import Ensure

VOLUME = "\\\\?\\Volume{6e5e5d3c-8e6b-11ea-a3a4-806e6f6e6963}\\"


@pytest.mark.parametrize("value", ["e", "E", "e:", "E:"])
def test_assert_drive_letter_valid_normalizes(value):
    assert assert_drive_letter_valid(value) == "E"
    assert assert_drive_letter_valid(value, colon=True) == "E:"


@pytest.mark.parametrize("value", ["", "EE", "E:\\", "1", "E::", "E\n", None, VOLUME])
def test_assert_drive_letter_valid_rejects(value):
    with pytest.raises(InvalidArgumentError) as exc:
        assert_drive_letter_valid(value)

    assert exc.value.argument == "drive_letter"
    assert "is not valid" in str(exc.value)


def test_try_normalize_drive_letter():
    assert try_normalize_drive_letter("d") == "D:"
    assert try_normalize_drive_letter(VOLUME) is None
    assert try_normalize_drive_letter("") is None


def test_is_volume_guid_path():
    assert is_volume_guid_path(VOLUME)
    assert is_volume_guid_path(VOLUME.rstrip("\\"))
    assert not is_volume_guid_path("D:")
    assert not is_volume_guid_path("")
    assert not is_volume_guid_path("\\\\?\\Volume{not-a-guid}\\")


def test_parse_disk_id():
    assert parse_disk_id("1") == 1
    assert parse_disk_id(3) == 3
    assert parse_disk_id(" 2 ") == 2


@pytest.mark.parametrize("value", ["0", "-1", "one", "", "1.5", None])
def test_parse_disk_id_rejects(value):
    with pytest.raises(InvalidArgumentError):
        parse_disk_id(value)


def test_parse_ensure():
    assert parse_ensure(None) is Ensure.PRESENT
    assert parse_ensure("absent") is Ensure.ABSENT
    assert parse_ensure("Present") is Ensure.PRESENT
    assert parse_ensure(Ensure.ABSENT) is Ensure.ABSENT

    with pytest.raises(InvalidArgumentError):
        parse_ensure("maybe")
