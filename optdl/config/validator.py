"""Resource configuration validation logic."""
import logging
from typing import Any, Dict, List

from optdl.core.drive_letter import DISK_ID_PATTERN, DRIVE_LETTER_PATTERN
from optdl.models.config import ConfigValidationError
from optdl.models.disk import Ensure

logger = logging.getLogger(__name__)

ALLOWED_KEYS = {'disk_id', 'drive_letter', 'ensure'}
VALID_ENSURE = {member.value.lower() for member in Ensure}


class ResourceConfigValidator:
    """Validates the optical_disks section of a configuration file."""

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration, collecting every problem before failing.

        Raises:
            ConfigValidationError: If validation fails
        """
        errors: List[str] = []

        if not isinstance(config, dict):
            raise ConfigValidationError("Configuration must be a mapping")

        unknown_sections = set(config) - {'optical_disks'}
        for section in sorted(unknown_sections):
            logger.warning(f"Ignoring unknown configuration section '{section}'")

        resources = config.get('optical_disks')
        if not isinstance(resources, list) or not resources:
            raise ConfigValidationError("'optical_disks' must be a non-empty list")

        seen_disks: Dict[str, int] = {}
        present_letters: Dict[str, str] = {}

        for position, entry in enumerate(resources, start=1):
            label = f"optical_disks[{position}]"
            if not isinstance(entry, dict):
                errors.append(f"{label}: entry must be a mapping")
                continue

            for key in sorted(set(entry) - ALLOWED_KEYS):
                errors.append(f"{label}: unknown key '{key}'")

            disk_id = str(entry.get('disk_id', '')).strip()
            if not DISK_ID_PATTERN.fullmatch(disk_id) or int(disk_id) < 1:
                errors.append(f"{label}: disk_id must be a positive integer")
                disk_id = ''
            else:
                disk_id = str(int(disk_id))

            drive_letter = entry.get('drive_letter')
            if not isinstance(drive_letter, str) or not DRIVE_LETTER_PATTERN.fullmatch(drive_letter):
                errors.append(f"{label}: drive_letter must be a single letter with optional colon")
                drive_letter = None

            ensure = str(entry.get('ensure') or Ensure.PRESENT.value).strip().lower()
            if ensure not in VALID_ENSURE:
                errors.append(f"{label}: ensure must be 'Present' or 'Absent'")

            if disk_id:
                if disk_id in seen_disks:
                    errors.append(
                        f"{label}: disk_id {disk_id} already configured in "
                        f"optical_disks[{seen_disks[disk_id]}]"
                    )
                else:
                    seen_disks[disk_id] = position

            if disk_id and drive_letter and ensure == Ensure.PRESENT.value.lower():
                letter = drive_letter[0].upper()
                if letter in present_letters and present_letters[letter] != disk_id:
                    errors.append(
                        f"{label}: drive letter {letter}: is also requested for disk {present_letters[letter]}"
                    )
                else:
                    present_letters[letter] = disk_id

        if errors:
            error_msg = "Configuration validation failed:\n  " + "\n  ".join(errors)
            raise ConfigValidationError(error_msg)
