"""Tests for tagged values and expression evaluation."""

import pytest

from tfmodules.block.values import EvalContext
from tfmodules.block.values import Value
from tfmodules.block.values import ValueKind
from tfmodules.block.values import evaluate


@pytest.mark.parametrize(
    "expr,kind",
    [
        (None, ValueKind.NULL),
        (True, ValueKind.BOOL),
        (3, ValueKind.NUMBER),
        (1.5, ValueKind.NUMBER),
        ("text", ValueKind.STRING),
        ([1, 2], ValueKind.LIST),
        ({"a": 1}, ValueKind.MAP),
    ],
)
def test_literal_kinds(expr, kind):
    """Plain Python literals map onto their value kinds."""
    assert evaluate(expr).kind is kind


def test_bool_is_not_number():
    """bool is checked before int so False stays a BOOL."""
    assert evaluate(False) == Value(ValueKind.BOOL, False)


def test_quoted_strings_are_unquoted():
    """Parsers that keep string quotes still yield the bare text."""
    assert evaluate('"./child"').raw == "./child"


def test_whole_reference_keeps_its_kind():
    """A string that is a single ${...} takes the referenced value's kind."""
    context = EvalContext({"var": {"replicas": 3}})
    assert evaluate("${var.replicas}", context) == Value(ValueKind.NUMBER, 3)


def test_interpolation_inside_string():
    """References embedded in text are substituted."""
    context = EvalContext({"var": {"env": "prod"}})
    assert evaluate("./modules/${var.env}", context).raw == "./modules/prod"


def test_unresolved_reference_is_null():
    """Any unresolvable reference makes the whole value null."""
    assert evaluate("${var.missing}", EvalContext()).is_null
    assert evaluate("./modules/${var.missing}", EvalContext()).is_null


def test_reference_without_context_is_null():
    assert evaluate("${var.anything}").is_null


def test_function_call_is_null():
    """Function calls are not evaluated."""
    context = EvalContext({"var": {"x": "a"}})
    assert evaluate('${lower(var.x)}', context).is_null


def test_index_and_quoted_key_traversal():
    """List indexes and quoted map keys are traversed; out of range is null."""
    context = EvalContext({"local": {"names": ["a", "b"], "by_env": {"prod": "p"}}})
    assert evaluate("${local.names[1]}", context).raw == "b"
    assert evaluate('${local.by_env["prod"]}', context).raw == "p"
    assert evaluate("${local.names[5]}", context).is_null


def test_child_context_sees_parent_bindings():
    """Child contexts fall back to their parent's bindings."""
    parent = EvalContext({"var": {"region": "eu"}})
    child = parent.child(count={"index": 2})
    assert evaluate("${var.region}-${count.index}", child).raw == "eu-2"


def test_as_string_rejects_other_kinds():
    with pytest.raises(TypeError):
        evaluate(4).as_string()


def test_to_python_unwraps_nested_values():
    """to_python unwraps nested lists and maps recursively."""
    assert evaluate({"a": [1, "x"], "b": None}).to_python() == {"a": [1, "x"], "b": None}
