"""Whole-project module tree loading.

Drives ``ModuleLoader`` one nesting level at a time: load the root directory,
resolve its module blocks, then descend into each loaded module with a child
context and resolve again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from ..block import Module
from ..settings import ScanSettings
from ..telemetry import Telemetry
from .errors import ModuleLoadError
from .keys import ROOT_MODULE
from .keys import resolve_key
from .loader import ModuleContext
from .loader import ModuleDefinition
from .loader import ModuleLoader
from .metadata import load_module_metadata

logger = logging.getLogger(__name__)


@dataclass
class ModuleTreeNode:
    """A loaded module and the modules loaded beneath it."""

    key: str
    context: ModuleContext
    module: Module
    definition: ModuleDefinition | None = None
    depth: int = 0
    children: list[ModuleTreeNode] = field(default_factory=list)

    @property
    def source(self) -> str | None:
        if self.definition is None:
            return None
        return self.definition.definition.value("source").raw

    def walk(self) -> Iterator[ModuleTreeNode]:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class ProjectScan:
    """Result of loading a whole project."""

    root: ModuleTreeNode
    unresolved: list[ModuleLoadError] = field(default_factory=list)

    def modules(self) -> list[ModuleTreeNode]:
        return list(self.root.walk())


def load_project(
    project_root: str | Path,
    settings: ScanSettings | None = None,
    telemetry: Telemetry | None = None,
) -> ProjectScan:
    """Load the root module and every module reachable from it.

    Args:
        project_root: Directory holding the root module
        settings: Scan options (default: ScanSettings())
        telemetry: Counter and trace sink

    Returns:
        Module tree plus deduplicated load failures from every level

    Raises:
        OSError: Root directory cannot be listed
        ParseError: A root file failed to parse and stop_on_parse_error is set
        ModuleMetadataError: Cached module metadata is malformed
    """
    settings = settings or ScanSettings()
    metadata = None
    if settings.use_module_metadata:
        metadata = load_module_metadata(project_root, settings.metadata_path)

    loader = ModuleLoader(project_root, metadata, telemetry=telemetry)
    context = loader.root_context()
    blocks, ignores = loader.load_directory_blocks(None, context.path, settings.stop_on_parse_error)

    root = ModuleTreeNode(
        key=ROOT_MODULE,
        context=context,
        module=Module(loader.project_root, context.path, tuple(blocks), tuple(ignores)),
    )
    scan = ProjectScan(root=root)
    _descend(loader, root, settings, scan.unresolved)

    logger.info(f"Loaded {len(scan.modules()) - 1} modules under {loader.project_root}")
    return scan


def _descend(
    loader: ModuleLoader, node: ModuleTreeNode, settings: ScanSettings, unresolved: list[ModuleLoadError]
) -> None:
    if node.depth >= settings.max_depth:
        if node.module.blocks_of_type("module"):
            logger.warning(
                f"Not descending into modules of {node.context.name}: maximum depth {settings.max_depth} reached"
            )
        return

    report = loader.scan_modules(list(node.module.blocks), node.context, settings.stop_on_parse_error)
    for error in report.errors:
        if all(known.source != error.source for known in unresolved):
            unresolved.append(error)

    for definition in report.definitions:
        child = ModuleTreeNode(
            key=resolve_key(node.context.name, definition.name),
            context=node.context.child(definition),
            module=definition.module,
            definition=definition,
            depth=node.depth + 1,
        )
        node.children.append(child)
        _descend(loader, child, settings, unresolved)
