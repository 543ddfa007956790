"""Block and module data models.

Defines the core types shared by the parser and the module resolver:
- Range: Source location of a block or directive
- Ignore: An inline directive suppressing a finding
- Block: One parsed configuration statement
- Module: One resolved directory's worth of blocks
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import date
from pathlib import Path
from typing import Any

from .values import EvalContext
from .values import Value
from .values import evaluate


@dataclass(frozen=True)
class Range:
    """File and line span of a parsed element."""

    filename: str
    start_line: int = 0
    end_line: int = 0

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}"
        return f"{self.filename}:{self.start_line}-{self.end_line}"


@dataclass(frozen=True)
class Ignore:
    """An ignore directive.

    Attributes:
        rule_id: Rule being suppressed (``*`` suppresses everything)
        range: Line the directive applies to
        expiry: Date after which the directive stops applying
    """

    rule_id: str
    range: Range
    expiry: date | None = None

    def is_expired(self, today: date | None = None) -> bool:
        if self.expiry is None:
            return False
        return (today or date.today()) > self.expiry


@dataclass(eq=False)
class Block:
    """A parsed configuration statement.

    ``parent`` is the lexical parent (the ``module`` block a directory was
    loaded for) and is None for blocks in the project root. ``context`` is the
    evaluation scope at the declaration site.
    """

    type: str
    labels: list[str]
    attributes: dict[str, Any]
    range: Range
    context: EvalContext | None = None
    parent: Block | None = None
    expansion_key: str = ""

    @property
    def label(self) -> str:
        return ".".join(self.labels)

    @property
    def reference(self) -> str:
        """Address of this block, e.g. ``module.vpc`` or ``aws_s3_bucket.logs``."""
        if self.type == "resource":
            return self.label
        return ".".join([self.type, *self.labels])

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def value(self, name: str) -> Value:
        """Evaluate one attribute; missing attributes evaluate to null."""
        if name not in self.attributes:
            return Value.null()
        return evaluate(self.attributes[name], self.context)

    def values(self) -> dict[str, Value]:
        """Evaluate every attribute in this block's context."""
        return {name: evaluate(expr, self.context) for name, expr in self.attributes.items()}

    def clone(self, label_suffix: str, context: EvalContext) -> Block:
        """Create a repetition instance with ``label_suffix`` as its expansion key."""
        labels = list(self.labels)
        if labels:
            labels[-1] = f"{labels[-1]}{label_suffix}"
        return Block(
            type=self.type,
            labels=labels,
            attributes=dict(self.attributes),
            range=self.range,
            context=context,
            parent=self.parent,
            expansion_key=label_suffix,
        )

    def __repr__(self) -> str:
        return f"Block({self.reference} at {self.range})"


def blocks_of_type(blocks: list[Block], block_type: str) -> list[Block]:
    return [b for b in blocks if b.type == block_type]


@dataclass(frozen=True)
class Module:
    """One resolved directory's worth of configuration."""

    root_path: Path
    module_path: Path
    blocks: tuple[Block, ...] = field(default_factory=tuple)
    ignores: tuple[Ignore, ...] = field(default_factory=tuple)

    def blocks_of_type(self, block_type: str) -> list[Block]:
        return blocks_of_type(list(self.blocks), block_type)
