"""Constants for the configuration loader."""

from typing import Final


# Every configuration file must start with this marker
CONFIG_TAG: Final[str] = "@config"

# Prefix characters used by the line classifier
COMMENT_PREFIX: Final[str] = "#"
DIRECTIVE_PREFIX: Final[str] = "@"

# Delimiter preferred over whitespace for assignments
ASSIGNMENT_DELIMITER: Final[str] = "="

# Directory entries never loaded by @includedir
SPECIAL_DIRECTORY_ENTRIES: Final[frozenset[str]] = frozenset({".", ".."})

# Default maximum length of an expanded line (BUFSIZ)
DEFAULT_WORK_BUFFER_SIZE: Final[int] = 8192

# Log component names
COMPONENT_LOADER = "loader"
COMPONENT_STORE = "store"
COMPONENT_CLI = "cli"
