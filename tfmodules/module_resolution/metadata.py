"""Cached module metadata written by ``terraform init``.

``terraform init`` downloads remote and registry modules into
``.terraform/modules/`` and records where each one landed:

    {"Modules": [{"Key": "vpc", "Source": "terraform-aws-modules/vpc/aws", "Dir": ".terraform/modules/vpc"}]}

``Dir`` is relative to the project root. When this table is available it is
authoritative for every key it lists.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError

from .errors import ModuleMetadataError

logger = logging.getLogger(__name__)

DEFAULT_METADATA_PATH = Path(".terraform") / "modules" / "modules.json"


class ModuleMetadataEntry(BaseModel):
    """One pre-fetched module."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(..., alias="Key", description="Dotted module identity key")
    dir: str = Field(..., alias="Dir", description="Cache directory relative to the project root")
    source: str = Field("", alias="Source", description="Source string the module was fetched from")
    version: str | None = Field(None, alias="Version", description="Resolved registry version")


class ModuleMetadata(BaseModel):
    """Read-only table of pre-fetched modules."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    modules: list[ModuleMetadataEntry] = Field(default_factory=list, alias="Modules")

    def model_post_init(self, context: Any) -> None:
        seen: set[str] = set()
        for entry in self.modules:
            if entry.key in seen:
                logger.warning(f"Module metadata lists key '{entry.key}' more than once; the first entry is used")
            seen.add(entry.key)

    def find(self, key: str) -> ModuleMetadataEntry | None:
        """Return the first entry whose key matches, or None."""
        for entry in self.modules:
            if entry.key == key:
                return entry
        return None


def load_module_metadata(project_root: str | Path, metadata_path: str | Path | None = None) -> ModuleMetadata | None:
    """Load the module metadata table for a project.

    Args:
        project_root: Project root directory
        metadata_path: Metadata file, relative to the root (default: .terraform/modules/modules.json)

    Returns:
        The metadata table, or None when the project was never initialised

    Raises:
        ModuleMetadataError: File exists but is unreadable or malformed
    """
    path = Path(project_root) / (metadata_path or DEFAULT_METADATA_PATH)
    if not path.exists():
        logger.debug(f"No module metadata at {path}")
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        metadata = ModuleMetadata.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ModuleMetadataError(f"Invalid module metadata at {path}: {e}") from e

    logger.debug(f"Loaded {len(metadata.modules)} module metadata entries from {path}")
    return metadata
