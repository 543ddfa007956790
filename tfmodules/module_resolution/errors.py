"""Module resolution exceptions."""

from ..block import Range


class ModuleResolutionError(Exception):
    """Base class for failures while resolving a module block."""

    pass


class ModuleStructureError(ModuleResolutionError):
    """Raised when a module block is malformed (missing label or source).

    These are attributable to one block and are never deduplicated.
    """

    def __init__(self, message: str, range: Range | None = None):
        self.range = range
        super().__init__(f"{message} at {range}" if range is not None else message)


class ModuleLoadError(ModuleResolutionError):
    """Raised when a declared source cannot be resolved or its directory cannot be loaded.

    Identity for deduplication is the literal ``source`` string.
    """

    def __init__(self, source: str, cause: BaseException | str):
        self.source = source
        self.cause = cause
        super().__init__(f"failed to load module '{source}': {cause}")


class ModuleMetadataError(ModuleResolutionError):
    """Raised when the cached module metadata file is unreadable or malformed."""

    pass
