"""Repetition expansion for ``count`` and ``for_each`` meta-arguments."""

import logging
import math

from ..block import Block
from ..block import EvalContext
from ..block import ValueKind

logger = logging.getLogger(__name__)


def expand_blocks(blocks: list[Block]) -> list[Block]:
    """Expand repeated declarations into concrete instances.

    Instances keep source order. A block whose meta-argument cannot be
    evaluated is kept as a single unexpanded instance.
    """
    expanded: list[Block] = []
    for block in blocks:
        if block.has_attribute("count"):
            expanded.extend(_expand_count(block))
        elif block.has_attribute("for_each"):
            expanded.extend(_expand_for_each(block))
        else:
            expanded.append(block)
    return expanded


def _expand_count(block: Block) -> list[Block]:
    count = block.value("count")
    if count.kind is not ValueKind.NUMBER or not _is_whole_number(count.raw):
        logger.debug(f"Could not evaluate count for {block!r}, leaving it unexpanded")
        return [block]

    context = block.context or EvalContext()
    return [block.clone(f"[{index}]", context.child(count={"index": index})) for index in range(int(count.raw))]


def _expand_for_each(block: Block) -> list[Block]:
    for_each = block.value("for_each")
    context = block.context or EvalContext()

    if for_each.kind is ValueKind.MAP:
        items = [(key, value.to_python()) for key, value in for_each.raw.items()]
    elif for_each.kind is ValueKind.LIST and all(item.kind is ValueKind.STRING for item in for_each.raw):
        items = [(item.raw, item.raw) for item in for_each.raw]
    else:
        logger.debug(f"Could not evaluate for_each for {block!r}, leaving it unexpanded")
        return [block]

    return [block.clone(f'["{key}"]', context.child(each={"key": key, "value": value})) for key, value in items]


def _is_whole_number(number: int | float) -> bool:
    if isinstance(number, int):
        return True
    return math.isfinite(number) and number.is_integer()
