"""Tagged attribute values and the expression evaluator.

Raw attribute expressions come out of the HCL parser as plain Python data:
literals stay literals and anything dynamic is a ``${...}`` string. This module
turns them into ``Value`` objects whose ``kind`` must be inspected before use.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

_INTERPOLATION = re.compile(r"\$\{([^{}]*)\}")
_REFERENCE = re.compile(r'[A-Za-z_][\w-]*(?:\.[A-Za-z_][\w-]*|\[\s*\d+\s*\]|\[\s*"[^"]*"\s*\])*')
_TRAVERSAL_STEP = re.compile(r'\[\s*"([^"]*)"\s*\]|\[\s*(\d+)\s*\]|([A-Za-z_][\w-]*)')


class ValueKind(str, Enum):
    """Closed set of value kinds an attribute can evaluate to."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    LIST = "list"
    MAP = "map"
    NULL = "null"


@dataclass(frozen=True)
class Value:
    """An evaluated attribute value tagged with its kind."""

    kind: ValueKind
    raw: Any = None

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL)

    @classmethod
    def string(cls, text: str) -> Value:
        return cls(ValueKind.STRING, text)

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def as_string(self) -> str:
        """Return the string payload.

        Raises:
            TypeError: The value is not a string
        """
        if self.kind is not ValueKind.STRING:
            raise TypeError(f"expected a string value, got {self.kind.value}")
        return self.raw

    def to_python(self) -> Any:
        """Unwrap into plain Python data (lists and dicts unwrapped recursively)."""
        if self.kind is ValueKind.LIST:
            return [item.to_python() for item in self.raw]
        if self.kind is ValueKind.MAP:
            return {key: item.to_python() for key, item in self.raw.items()}
        return self.raw


class EvalContext:
    """Variable bindings visible to expressions declared in one scope.

    Contexts chain to a parent; a name missing here is looked up in the parent.
    """

    def __init__(self, variables: dict[str, Any] | None = None, parent: EvalContext | None = None):
        self.variables: dict[str, Any] = dict(variables or {})
        self.parent = parent

    def child(self, **variables: Any) -> EvalContext:
        """Create a nested context that sees this one's bindings."""
        return EvalContext(variables, parent=self)

    def get(self, name: str) -> Any:
        """Look up a root variable name.

        Raises:
            KeyError: Name is not bound in this context chain
        """
        context: EvalContext | None = self
        while context is not None:
            if name in context.variables:
                return context.variables[name]
            context = context.parent
        raise KeyError(name)

    def __repr__(self) -> str:
        return f"EvalContext({sorted(self.variables)})"


def evaluate(expr: Any, context: EvalContext | None = None) -> Value:
    """Evaluate a raw parsed expression into a tagged ``Value``.

    Unresolvable references and function calls evaluate to null.
    """
    if expr is None:
        return Value.null()
    if isinstance(expr, bool):
        return Value(ValueKind.BOOL, expr)
    if isinstance(expr, (int, float)):
        return Value(ValueKind.NUMBER, expr)
    if isinstance(expr, (list, tuple)):
        return Value(ValueKind.LIST, [evaluate(item, context) for item in expr])
    if isinstance(expr, dict):
        return Value(ValueKind.MAP, {str(key): evaluate(item, context) for key, item in expr.items()})
    if isinstance(expr, str):
        return _evaluate_string(expr, context)
    return Value.null()


def unquote(text: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text


class _Unresolved(Exception):
    pass


def _evaluate_string(expr: str, context: EvalContext | None) -> Value:
    text = unquote(expr)

    whole = _INTERPOLATION.fullmatch(text)
    if whole:
        return _evaluate_reference(whole.group(1).strip(), context)

    if "${" not in text:
        return Value.string(text)

    def substitute(match: re.Match) -> str:
        value = _evaluate_reference(match.group(1).strip(), context)
        if value.kind is ValueKind.STRING:
            return value.raw
        if value.kind is ValueKind.BOOL:
            return "true" if value.raw else "false"
        if value.kind is ValueKind.NUMBER:
            return str(value.raw)
        raise _Unresolved(match.group(0))

    try:
        return Value.string(_INTERPOLATION.sub(substitute, text))
    except _Unresolved:
        return Value.null()


def _evaluate_reference(expr: str, context: EvalContext | None) -> Value:
    if context is None or not _REFERENCE.fullmatch(expr):
        return Value.null()

    steps = _TRAVERSAL_STEP.findall(expr)
    root = steps[0][2]
    try:
        current = context.get(root)
    except KeyError:
        return Value.null()

    for quoted_key, index, attribute in steps[1:]:
        if index and isinstance(current, list):
            position = int(index)
            if position >= len(current):
                return Value.null()
            current = current[position]
            continue
        key = quoted_key or attribute or index
        if not isinstance(current, dict) or key not in current:
            return Value.null()
        current = current[key]

    # Bound values are evaluated without context so references cannot recurse
    return evaluate(current, None)
