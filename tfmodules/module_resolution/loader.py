"""Module block resolution and loading.

Resolution order for a module block's directory (first match wins):
1. Cached module metadata (``terraform init`` output), looked up by key
2. Local relative source (``./`` or ``../``) joined onto the current module's directory

Anything else (registry, git, s3, absolute paths) cannot be resolved without
the metadata cache and is reported as a ModuleLoadError. Nothing is fetched.

Nested module blocks found in a loaded module are not followed here. The
caller descends with ``ModuleContext.child`` and calls ``load_modules`` again.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path

from ..block import Block
from ..block import EvalContext
from ..block import Ignore
from ..block import Module
from ..block import ValueKind
from ..block import blocks_of_type
from ..parser import ParseError
from ..parser import RawBlock
from ..parser import expand_blocks
from ..parser import list_source_files
from ..parser import parse_file
from ..telemetry import NullTelemetry
from ..telemetry import Telemetry
from ..utils.error_format import format_error_message
from .errors import ModuleLoadError
from .errors import ModuleResolutionError
from .errors import ModuleStructureError
from .keys import MODULE_PREFIX
from .keys import ROOT_MODULE
from .keys import resolve_key
from .metadata import ModuleMetadata

logger = logging.getLogger(__name__)

LOCAL_SOURCE_PREFIXES = tuple(dict.fromkeys(["./", "../", f".{os.sep}", f"..{os.sep}"]))

FileLister = Callable[[Path], list[Path]]
FileParser = Callable[[Path], tuple[list[RawBlock], list[Ignore]]]
BlockExpander = Callable[[list[Block]], list[Block]]


@dataclass(frozen=True)
class ModuleContext:
    """Where a resolution pass is running.

    Attributes:
        name: ``root`` or the chain of module references from the root,
            e.g. ``module.network:module.subnets[0]``
        path: Directory of the module currently being processed
    """

    name: str
    path: Path

    @classmethod
    def root(cls, project_root: str | Path) -> ModuleContext:
        return cls(ROOT_MODULE, Path(os.path.abspath(project_root)))

    @property
    def is_root(self) -> bool:
        return self.name == ROOT_MODULE

    def child(self, definition: ModuleDefinition) -> ModuleContext:
        """Context for descending into a loaded module."""
        reference = f"{MODULE_PREFIX}{definition.name}"
        name = reference if self.is_root else f"{self.name}:{reference}"
        return ModuleContext(name, definition.path)


@dataclass(frozen=True)
class ModuleDefinition:
    """A module block resolved to a directory and loaded.

    Attributes:
        name: The module block's label
        path: Resolved absolute directory
        definition: The originating module block
        modules: The loaded module (one element)
    """

    name: str
    path: Path
    definition: Block
    modules: tuple[Module, ...]

    @property
    def module(self) -> Module:
        return self.modules[0]


@dataclass
class ModuleLoadReport:
    """Accumulated results of one resolution pass. Not shared between passes."""

    definitions: list[ModuleDefinition] = field(default_factory=list)
    errors: list[ModuleLoadError] = field(default_factory=list)

    def record_error(self, error: ModuleLoadError) -> bool:
        """Record a load failure unless its source was already recorded.

        Returns:
            True if the error was new
        """
        if any(known.source == error.source for known in self.errors):
            return False
        self.errors.append(error)
        return True

    @property
    def unresolved_sources(self) -> list[str]:
        return [error.source for error in self.errors]


class ModuleLoader:
    """Resolves module blocks to directories and loads their blocks.

    Collaborators (file listing, parsing, repetition expansion, telemetry) are
    injectable; the defaults read real HCL from disk.
    """

    def __init__(
        self,
        project_root: str | Path,
        module_metadata: ModuleMetadata | None = None,
        *,
        telemetry: Telemetry | None = None,
        list_files: FileLister = list_source_files,
        parse: FileParser = parse_file,
        expand: BlockExpander = expand_blocks,
    ):
        """Initialize loader.

        Args:
            project_root: Project root; metadata directories are relative to it
            module_metadata: Pre-fetched module table, if the project was initialised
            telemetry: Counter and trace sink (default: discard)
            list_files: Source file enumerator
            parse: Single-file parser
            expand: count/for_each expander
        """
        self.project_root = Path(os.path.abspath(project_root))
        self.module_metadata = module_metadata
        self.telemetry = telemetry or NullTelemetry()
        self._list_files = list_files
        self._parse = parse
        self._expand = expand

    def root_context(self) -> ModuleContext:
        return ModuleContext.root(self.project_root)

    def load_modules(
        self, blocks: list[Block], context: ModuleContext | None = None, stop_on_parse_error: bool = False
    ) -> list[ModuleDefinition]:
        """Resolve and load every module block in ``blocks``.

        Per-module failures are logged and never raised.

        Returns:
            Successfully loaded modules, in expansion order
        """
        return self.scan_modules(blocks, context, stop_on_parse_error).definitions

    def scan_modules(
        self, blocks: list[Block], context: ModuleContext | None = None, stop_on_parse_error: bool = False
    ) -> ModuleLoadReport:
        """Like ``load_modules`` but also returns the deduplicated load failures."""
        report = ModuleLoadReport()

        for module_block in self._expand(blocks_of_type(blocks, "module")):
            if module_block.label == "":
                continue
            try:
                report.definitions.append(self.load_module(module_block, context, stop_on_parse_error))
            except ModuleLoadError as e:
                report.record_error(e)
            except ModuleResolutionError as e:
                logger.warning(f"Failed to load module: {e}")
            except Exception as e:
                # Collaborator failures are confined to the one module being loaded
                logger.warning(f"Failed to load module: {format_error_message(e)}")
                logger.debug("Module load failure detail", exc_info=True)

        if report.errors:
            listing = "\n".join(f" - {source}" for source in report.unresolved_sources)
            logger.warning(
                "Did you forget to run 'terraform init'? The following modules failed to load:\n" + listing
            )

        return report

    def load_module(
        self, block: Block, context: ModuleContext | None = None, stop_on_parse_error: bool = False
    ) -> ModuleDefinition:
        """Resolve one module block and load the directory it points at.

        Raises:
            ModuleStructureError: Block has no label or no string source
            ModuleLoadError: Source cannot be resolved or its directory cannot be loaded
        """
        if block.label == "":
            raise ModuleStructureError("module without label", block.range)

        source_value = block.value("source")
        if source_value.kind is not ValueKind.STRING or source_value.raw == "":
            raise ModuleStructureError("could not read module source attribute", block.range)
        source = source_value.as_string()

        context = context or self.root_context()
        module_path = self.resolve_module_path(block, source, context)

        try:
            blocks, ignores = self.load_directory_blocks(block, module_path, stop_on_parse_error)
        except (OSError, ParseError) as e:
            raise ModuleLoadError(source, e) from e

        self.telemetry.trace(f"Loaded module '{module_path}' (requested at {block.range})")
        self.telemetry.increment("modules")

        return ModuleDefinition(
            name=block.label,
            path=module_path,
            definition=block,
            modules=(Module(self.project_root, module_path, tuple(blocks), tuple(ignores)),),
        )

    def resolve_module_path(self, block: Block, source: str, context: ModuleContext) -> Path:
        """Pick the directory a module block's source refers to.

        Raises:
            ModuleLoadError: No cached entry and the source is not a local relative path
        """
        if self.module_metadata is not None:
            key = resolve_key(context.name, block.label)
            entry = self.module_metadata.find(key)
            if entry is not None:
                logger.debug(f"[module:resolve] {key} -> metadata ({entry.dir})")
                return Path(os.path.normpath(self.project_root / entry.dir))

        if not source.startswith(LOCAL_SOURCE_PREFIXES):
            raise ModuleLoadError(source, "missing source code")

        logger.debug(f"[module:resolve] {block.label} -> local ({source})")
        return Path(os.path.normpath(Path(os.path.abspath(context.path)) / source))

    def load_directory_blocks(
        self, owning_block: Block | None, directory: Path, stop_on_parse_error: bool = False
    ) -> tuple[list[Block], list[Ignore]]:
        """Parse every source file in ``directory`` into blocks bound to a fresh module context.

        A file that fails to parse aborts the load when ``stop_on_parse_error``
        is set; otherwise it is logged and skipped.

        Raises:
            OSError: Directory cannot be listed
            ParseError: A file failed to parse and ``stop_on_parse_error`` is set
        """
        files = self._list_files(directory)

        blocks: list[Block] = []
        ignores: list[Ignore] = []
        module_context = EvalContext()

        for path in files:
            try:
                file_blocks, file_ignores = self._parse(path)
            except ParseError as e:
                if stop_on_parse_error:
                    raise
                logger.warning(f"HCL error: {e}")
                ignores.extend(getattr(e, "ignores", []))
                continue

            self.telemetry.increment("files")
            if file_blocks:
                self.telemetry.trace(f"Added {len(file_blocks)} blocks from {path}...")
                self.telemetry.increment("blocks", len(file_blocks))

            for raw in file_blocks:
                blocks.append(
                    Block(
                        type=raw.type,
                        labels=list(raw.labels),
                        attributes=dict(raw.attributes),
                        range=raw.range,
                        context=module_context,
                        parent=owning_block,
                    )
                )
            ignores.extend(file_ignores)

        return blocks, ignores
