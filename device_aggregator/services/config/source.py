"""
Device Set Source

Reads a complete DeviceSet snapshot from a JSON or YAML file.
The file is read wholesale in a single call; partial reads are never
merged with a previous snapshot.
"""

import json
from pathlib import Path

import yaml

from ...common.config import DeviceSet, parse_device_set
from ...common.exceptions import ConfigError

YAML_SUFFIXES = (".yaml", ".yml")


class FileConfigSource:
    """
    File-backed device set.

    Relative device file paths are resolved against the directory
    holding the config file.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> DeviceSet:
        """
        Read and parse the device set.

        Raises:
            ConfigError: If the file is unreadable or malformed
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"cannot read {self.path}: {e}", path=str(self.path)) from e

        try:
            if self.path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot parse {self.path}: {e}", path=str(self.path)) from e

        try:
            return parse_device_set(data, base_dir=self.path.parent)
        except ConfigError as e:
            e.path = str(self.path)
            raise

    def __repr__(self) -> str:
        return f"FileConfigSource({str(self.path)!r})"
