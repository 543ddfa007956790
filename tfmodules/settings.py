"""Scan settings.

Settings come from an optional ``.tfmodules.yaml`` at the project root; CLI
flags are applied on top by the caller.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = ".tfmodules.yaml"


class SettingsError(Exception):
    """Raised when the settings file cannot be read or fails validation."""

    pass


class ScanSettings(BaseModel):
    """Options for one project scan."""

    stop_on_parse_error: bool = Field(
        default=False, description="Fail a module when any of its files has a syntax error"
    )
    use_module_metadata: bool = Field(default=True, description="Resolve modules through terraform init's cache")
    metadata_path: str = Field(
        default=".terraform/modules/modules.json", description="Module metadata file, relative to the project root"
    )
    max_depth: int = Field(default=10, ge=0, description="Deepest module nesting level to descend into")
    log_level: str = Field(default="WARNING", description="Console log level")

    def with_overrides(self, **overrides: Any) -> "ScanSettings":
        """Return a copy with every non-None override applied."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        return self.model_validate({**self.model_dump(), **updates})


def load_settings(project_root: str | Path) -> ScanSettings:
    """Load settings for a project, falling back to defaults.

    Raises:
        SettingsError: Settings file exists but is invalid
    """
    path = Path(project_root) / SETTINGS_FILENAME
    if not path.exists():
        return ScanSettings()

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SettingsError(f"Failed to read settings from {path}: {e}") from e

    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")

    try:
        settings = ScanSettings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}") from e

    logger.debug(f"Loaded settings from {path}")
    return settings
