"""tfmodules - module resolution for Terraform static analysis.

Discovers ``module`` blocks, resolves each one to a directory (through the
``terraform init`` cache or a local relative path) and loads its blocks.
"""

from .block import Block
from .block import Module
from .module_resolution import ModuleContext
from .module_resolution import ModuleDefinition
from .module_resolution import ModuleLoader
from .module_resolution import ModuleLoadError
from .module_resolution import load_project
from .module_resolution import resolve_key

__all__ = [
    "Block",
    "Module",
    "ModuleContext",
    "ModuleDefinition",
    "ModuleLoadError",
    "ModuleLoader",
    "load_project",
    "resolve_key",
]
