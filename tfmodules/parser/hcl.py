"""HCL source file enumeration and parsing.

Parsing is delegated to python-hcl2, which returns nested dicts keyed by block
type and then by each label in turn. Block labels are peeled off according to
how many labels each block type declares.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import hcl2

from ..block import Ignore
from ..block import Range
from ..block.values import unquote
from .errors import FileParseError
from .ignores import extract_ignores

logger = logging.getLogger(__name__)

SOURCE_FILE_SUFFIX = ".tf"

LABEL_COUNTS: dict[str, int] = {
    "resource": 2,
    "data": 2,
    "module": 1,
    "variable": 1,
    "output": 1,
    "provider": 1,
}


@dataclass(frozen=True)
class RawBlock:
    """A block as it comes out of the parser, before it is bound to a module."""

    type: str
    labels: tuple[str, ...]
    attributes: dict[str, Any]
    range: Range


def list_source_files(directory: str | Path) -> list[Path]:
    """List the HCL source files directly inside a directory.

    Raises:
        OSError: Directory is missing or unreadable
    """
    directory = Path(directory)
    return sorted(path for path in directory.iterdir() if path.is_file() and path.name.endswith(SOURCE_FILE_SUFFIX))


def parse_file(path: str | Path) -> tuple[list[RawBlock], list[Ignore]]:
    """Parse one source file into raw blocks and ignore directives.

    Raises:
        FileParseError: File is unreadable or has a syntax error
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise FileParseError(path, e) from e

    ignores = extract_ignores(text, str(path))

    try:
        document = hcl2.loads(text, with_meta=True)
    except Exception as e:
        # lark surfaces syntax problems through several unrelated exception types
        raise FileParseError(path, e, ignores=ignores) from e

    blocks: list[RawBlock] = []
    for block_type, bodies in document.items():
        if not isinstance(bodies, list):
            # Top-level attribute, as found in .tfvars-style content
            continue
        label_count = LABEL_COUNTS.get(block_type, 0)
        for body in bodies:
            blocks.extend(_unwrap(block_type, body, label_count, (), str(path)))

    logger.debug(f"Parsed {len(blocks)} blocks and {len(ignores)} ignores from {path}")
    return blocks, ignores


def _unwrap(block_type: str, body: Any, remaining: int, labels: tuple[str, ...], filename: str) -> list[RawBlock]:
    if remaining == 0 or not isinstance(body, dict):
        attributes = dict(body) if isinstance(body, dict) else {}
        start_line = attributes.pop("__start_line__", 0)
        end_line = attributes.pop("__end_line__", start_line)
        return [RawBlock(block_type, labels, attributes, Range(filename, start_line, end_line))]

    blocks: list[RawBlock] = []
    for label, inner in body.items():
        if label.startswith("__"):
            continue
        blocks.extend(_unwrap(block_type, inner, remaining - 1, (*labels, unquote(label)), filename))
    return blocks
