"""Parser exceptions."""

from pathlib import Path

from ..block import Ignore


class ParseError(Exception):
    """Base class for parser failures."""

    pass


class FileParseError(ParseError):
    """Raised when a source file cannot be read or is not valid HCL.

    ``ignores`` holds whatever directives were recovered from the raw text
    before the syntax error was hit.
    """

    def __init__(self, path: Path, cause: BaseException | str, ignores: list[Ignore] | None = None):
        self.path = Path(path)
        self.cause = cause
        self.ignores = list(ignores or [])
        super().__init__(f"failed to parse {self.path}: {cause}")
