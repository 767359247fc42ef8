"""Error hints for configuration load errors.

Provides user-friendly hints with actionable remediation steps
for common load errors.
"""

from typing import Final

from loadconfig.loader.errors import ErrorRecord, LoadErrorClass


# Mapping of error classes to user-friendly hints
ERROR_HINTS: Final[dict[LoadErrorClass, str]] = {
    LoadErrorClass.INVALID_ARGUMENTS: (
        "The directive needs an argument. Add a file or directory path after it."
    ),
    LoadErrorClass.MISSING_REQUIRED_FILE: (
        "The file does not exist or cannot be read. Check the path, or use "
        "@include instead of @require if the file is optional."
    ),
    LoadErrorClass.NOT_A_CONFIG_FILE: (
        "Configuration files must start with an @config line. "
        "Add '@config <description>' as the first line."
    ),
    LoadErrorClass.UNSUPPORTED_DIRECTIVE: (
        "Supported directives are @config, @include, @require and @includedir."
    ),
    LoadErrorClass.INVALID_ASSIGNMENT: (
        "Assignments look like 'name value' or 'name=value'. "
        "Both the name and the value are required."
    ),
    LoadErrorClass.EXPANSION_ERROR: (
        "A ${name} reference could not be expanded. Check that the variable "
        "exists and the expanded line fits the work buffer."
    ),
    LoadErrorClass.VARIABLE_NOT_FOUND: (
        "The variable is not declared in the store. Declare it first "
        "or disable strict mode."
    ),
    LoadErrorClass.VARIABLE_WRITE_FAILED: (
        "The variable store rejected the value. Check the store location "
        "and permissions."
    ),
}

DEFAULT_HINT: Final[str] = "Check the configuration file syntax."


def get_error_hint(error_class: LoadErrorClass) -> str:
    """Get a user-friendly hint for a load error.

    Args:
        error_class: The classification of the error.

    Returns:
        A user-friendly hint string.
    """
    return ERROR_HINTS.get(error_class, DEFAULT_HINT)


def format_load_error(record: ErrorRecord, *, include_hint: bool = True) -> str:
    """Format a load error with optional hint.

    Args:
        record: The error to format.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = record.message
    if record.file is not None:
        base = f"{base} in {record.file} on line {record.line}"
    if include_hint:
        return f"{base}\n    Hint: {get_error_hint(record.error_class)}"
    return base
