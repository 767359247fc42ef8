"""Line classification and parsing for configuration files."""

import re

from loadconfig.loader.constants import (
    ASSIGNMENT_DELIMITER,
    COMMENT_PREFIX,
    DIRECTIVE_PREFIX,
)
from loadconfig.loader.errors import InvalidAssignmentError
from loadconfig.loader.models import ConfigLine, LineKind


_WHITESPACE_RUN = re.compile(r"\s+")


def classify_line(text: str) -> LineKind:
    """Classify an expanded configuration line.

    Args:
        text: Line text without the trailing newline.

    Returns:
        The kind of the line.
    """
    if not text:
        return LineKind.BLANK
    if text.startswith(COMMENT_PREFIX):
        return LineKind.COMMENT
    if text.startswith(DIRECTIVE_PREFIX):
        return LineKind.DIRECTIVE
    return LineKind.ASSIGNMENT


def _split_on_whitespace(text: str) -> tuple[str, str | None]:
    """Split at the first whitespace run, returning None when there is none."""
    match = _WHITESPACE_RUN.search(text)
    if match is None:
        return text, None
    return text[: match.start()], text[match.end() :]


def parse_directive(text: str) -> tuple[str, str]:
    """Split a directive line into its keyword and argument.

    The argument is the verbatim remainder after the first whitespace run.
    Unknown keywords are not rejected here.

    Args:
        text: A directive line.

    Returns:
        Tuple of (keyword, argument); the argument is empty when the line
        has no whitespace.
    """
    keyword, argument = _split_on_whitespace(text)
    return keyword, argument or ""


def parse_assignment(text: str) -> tuple[str, str]:
    """Split an assignment line into a variable name and value.

    When the line contains ``=`` the first ``=`` is the delimiter,
    otherwise the first whitespace run is. Neither side is trimmed.

    Args:
        text: An assignment line.

    Returns:
        Tuple of (name, value).

    Raises:
        InvalidAssignmentError: If the name or the value is empty.
    """
    if ASSIGNMENT_DELIMITER in text:
        name, _, value = text.partition(ASSIGNMENT_DELIMITER)
    else:
        name, maybe_value = _split_on_whitespace(text)
        value = maybe_value or ""

    if not name or not value:
        raise InvalidAssignmentError(f"Invalid variable assignment {text!r}")
    return name, value


def parse_line(text: str) -> ConfigLine:
    """Classify and parse one expanded configuration line.

    Args:
        text: Line text without the trailing newline.

    Returns:
        The parsed line.

    Raises:
        InvalidAssignmentError: If an assignment line is malformed.
    """
    kind = classify_line(text)

    if kind is LineKind.DIRECTIVE:
        keyword, argument = parse_directive(text)
        return ConfigLine(text=text, kind=kind, keyword=keyword, argument=argument)

    if kind is LineKind.ASSIGNMENT:
        name, value = parse_assignment(text)
        return ConfigLine(text=text, kind=kind, name=name, value=value)

    return ConfigLine(text=text, kind=kind)
