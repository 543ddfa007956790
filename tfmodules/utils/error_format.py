"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when their str()
representation is empty (e.g., a bare PermissionError), and that paths or HCL
snippets containing brackets are not eaten by Rich markup.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

# Friendly messages for exception types that commonly arrive without details
FRIENDLY_MESSAGES: dict[type, str] = {
    FileNotFoundError: "Directory or file does not exist.",
    NotADirectoryError: "Path is not a directory.",
    PermissionError: "Permission denied.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(PermissionError())
        'PermissionError: Permission denied.'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        if include_type and error_type not in error_str:
            return f"{error_type}: {error_str}"
        return error_str

    for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
        if isinstance(e, exc_type):
            return f"{error_type}: {friendly_msg}"

    return f"{error_type}: (no additional details)"


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Module sources such as ``module.x[0]`` and for_each keys contain brackets
    that Rich would otherwise read as markup tags.
    """
    return _escape_markup(str(value))
