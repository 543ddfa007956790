"""Module identity keys.

A key is the dotted chain of module labels from the project root, e.g.
``network.subnets.nat`` for ``module.nat`` declared inside ``module.subnets``
inside ``module.network``. It is the same format ``terraform init`` writes to
``.terraform/modules/modules.json``.
"""

import re

ROOT_MODULE = "root"
MODULE_PREFIX = "module."
CONTEXT_SEPARATOR = ":"

# count / for_each instance indexes, which may themselves contain dots
_INDEX_PATTERN = re.compile(r"\[.+?\]")


def strip_indexes(name: str) -> str:
    return _INDEX_PATTERN.sub("", name)


def resolve_key(context_path: str, label: str) -> str:
    """Derive the metadata key for a module block.

    Args:
        context_path: ``root`` or a colon-separated chain of module
            references, e.g. ``module.a:module.b[0]``
        label: The module block's label

    Returns:
        Dotted key with every repetition index removed
    """
    if context_path == ROOT_MODULE:
        return strip_indexes(label)

    segments = [segment.removeprefix(MODULE_PREFIX) for segment in context_path.split(CONTEXT_SEPARATOR)]
    return strip_indexes(".".join(segments) + "." + label)
