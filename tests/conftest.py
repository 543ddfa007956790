"""Pytest configuration and shared fixtures for tfmodules tests."""

import logging
from pathlib import Path

import pytest

from tfmodules.block import Block
from tfmodules.block import Range


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler and level changes made by CLI logging setup."""
    package_logger = logging.getLogger("tfmodules")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        if handler not in handlers:
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)


@pytest.fixture
def write_tree(tmp_path):
    """Write a dict of relative path -> content under tmp_path and return the root."""

    def _write(files: dict[str, str], root: Path | None = None) -> Path:
        base = root or tmp_path
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return base

    return _write


@pytest.fixture
def module_block():
    """Factory for module blocks shaped the way the parser produces them."""
    return make_module_block


def make_module_block(label: str | None, source=None, **attributes) -> Block:
    attrs = dict(attributes)
    if source is not None:
        attrs["source"] = source
    return Block(
        type="module",
        labels=[label] if label is not None else [],
        attributes=attrs,
        range=Range("main.tf", 1, 3),
    )
