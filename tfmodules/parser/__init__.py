"""HCL parsing: file enumeration, block parsing, ignores and repetition expansion."""

from .errors import FileParseError
from .errors import ParseError
from .expand import expand_blocks
from .hcl import RawBlock
from .hcl import list_source_files
from .hcl import parse_file
from .ignores import extract_ignores

__all__ = [
    "FileParseError",
    "ParseError",
    "RawBlock",
    "expand_blocks",
    "extract_ignores",
    "list_source_files",
    "parse_file",
]
