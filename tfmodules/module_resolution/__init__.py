"""Module resolution: turning ``module`` blocks into loaded modules.

Resolution prefers the ``terraform init`` metadata cache and falls back to
local relative sources. Remote sources are never fetched.
"""

from .errors import ModuleLoadError
from .errors import ModuleMetadataError
from .errors import ModuleResolutionError
from .errors import ModuleStructureError
from .keys import resolve_key
from .loader import ModuleContext
from .loader import ModuleDefinition
from .loader import ModuleLoader
from .loader import ModuleLoadReport
from .metadata import ModuleMetadata
from .metadata import ModuleMetadataEntry
from .metadata import load_module_metadata
from .tree import ModuleTreeNode
from .tree import ProjectScan
from .tree import load_project

__all__ = [
    "ModuleContext",
    "ModuleDefinition",
    "ModuleLoadError",
    "ModuleLoadReport",
    "ModuleLoader",
    "ModuleMetadata",
    "ModuleMetadataEntry",
    "ModuleMetadataError",
    "ModuleResolutionError",
    "ModuleStructureError",
    "ModuleTreeNode",
    "ProjectScan",
    "load_module_metadata",
    "load_project",
    "resolve_key",
]
