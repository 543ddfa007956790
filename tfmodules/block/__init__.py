"""Parsed configuration blocks, modules and evaluated values."""

from .models import Block
from .models import Ignore
from .models import Module
from .models import Range
from .models import blocks_of_type
from .values import EvalContext
from .values import Value
from .values import ValueKind
from .values import evaluate

__all__ = [
    "Block",
    "EvalContext",
    "Ignore",
    "Module",
    "Range",
    "Value",
    "ValueKind",
    "blocks_of_type",
    "evaluate",
]
