"""Inline ignore directive extraction.

Recognised forms (``#`` or ``//`` comments):

    resource "aws_s3_bucket" "logs" { #tfsec:ignore:aws-s3-enable-versioning
    #tfsec:ignore:aws-s3-encryption:exp:2026-01-31

A directive on a line of its own applies to the following line; a trailing
directive applies to its own line. Several directives may share one comment.
"""

import logging
import re
from datetime import date

from ..block import Ignore
from ..block import Range

logger = logging.getLogger(__name__)

IGNORE_PATTERN = re.compile(r"tfsec:ignore:([\w*./-]+?)(?::exp:(\d{4}-\d{2}-\d{2}))?(?=\s|$)")
_COMMENT_START = re.compile(r"(#|//)")


def extract_ignores(text: str, filename: str) -> list[Ignore]:
    """Collect every ignore directive in ``text``.

    Args:
        text: Raw file content
        filename: Name recorded in each directive's range

    Returns:
        Directives in file order
    """
    ignores: list[Ignore] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        comment = _COMMENT_START.search(line)
        if comment is None:
            continue

        target_line = line_number + 1 if not line[: comment.start()].strip() else line_number
        for match in IGNORE_PATTERN.finditer(line, comment.end()):
            rule_id, expiry_text = match.groups()
            ignores.append(
                Ignore(
                    rule_id=rule_id,
                    range=Range(filename, target_line, target_line),
                    expiry=_parse_expiry(expiry_text, filename, line_number),
                )
            )
    return ignores


def _parse_expiry(expiry_text: str | None, filename: str, line_number: int) -> date | None:
    if not expiry_text:
        return None
    try:
        return date.fromisoformat(expiry_text)
    except ValueError:
        logger.warning(f"Ignoring invalid expiry date '{expiry_text}' at {filename}:{line_number}")
        return None
