"""YAML resource configuration loader."""
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from optdl.config.validator import ResourceConfigValidator
from optdl.core.drive_letter import assert_drive_letter_valid, parse_ensure
from optdl.models.config import ConfigValidationError
from optdl.models.disk import DesiredState, Ensure


class ResourceConfigLoader:
    """Loads desired optical disk states from an optdl.yml file."""

    def __init__(self, config_path: str = "optdl.yml"):
        self.config_path = Path(config_path)
        self.raw_config: Optional[Dict[str, Any]] = None
        self.validator = ResourceConfigValidator()

    def load(self) -> List[DesiredState]:
        """Load and validate the configuration.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigValidationError: If the file is empty or invalid
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path) as f:
            try:
                self.raw_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigValidationError(f"Config file is not valid YAML: {e}") from e

        if not self.raw_config:
            raise ConfigValidationError("Config file is empty.")

        self.validator.validate(self.raw_config)

        return [
            DesiredState(
                disk_id=str(int(str(entry['disk_id']).strip())),
                drive_letter=assert_drive_letter_valid(entry['drive_letter'], colon=True),
                ensure=parse_ensure(entry.get('ensure') or Ensure.PRESENT),
            )
            for entry in self.raw_config['optical_disks']
        ]
