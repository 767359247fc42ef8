"""Data models for the configuration loader."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from loadconfig.loader.errors import ErrorRecord


class LineKind(str, Enum):
    """Kind of a configuration line."""

    BLANK = "blank"
    COMMENT = "comment"
    DIRECTIVE = "directive"
    ASSIGNMENT = "assignment"


class DirectiveKeyword(str, Enum):
    """Recognized directive keywords."""

    CONFIG = "@config"
    INCLUDE = "@include"
    REQUIRE = "@require"
    INCLUDEDIR = "@includedir"


class DirectiveAction(str, Enum):
    """Structural action a directive resolves to."""

    INFO = "info"
    INCLUDE_OPTIONAL = "include_optional"
    INCLUDE_MANDATORY = "include_mandatory"
    INCLUDE_DIRECTORY = "include_directory"


class ConfigLine(BaseModel):
    """A single expanded configuration line and its parsed parts.

    Attributes:
        text: Line text without the trailing newline.
        kind: Classification of the line.
        keyword: Directive keyword (directives only).
        argument: Directive argument (directives only).
        name: Variable name (assignments only).
        value: Variable value (assignments only).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str
    kind: LineKind
    keyword: str | None = None
    argument: str | None = None
    name: str | None = None
    value: str | None = None


class DirectiveOutcome(BaseModel):
    """Resolved action for a directive line.

    Attributes:
        action: What the loader should do.
        target: File or directory path, or the info text for INFO.
        required: Mandatory flag for the nested load. None leaves the
            current flag unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    action: DirectiveAction
    target: str
    required: bool | None = None


class LoadResult(BaseModel):
    """Outcome of a top-level configuration load.

    Only the most recent failure is kept; earlier failures are logged
    as they happen.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    run_id: str = Field(min_length=1)
    root_path: str = Field(min_length=1)
    success: bool
    error: ErrorRecord | None = None
    files_loaded: int = Field(default=0, ge=0)
    assignments_applied: int = Field(default=0, ge=0)
    line_failures: int = Field(default=0, ge=0)
    duration_ms: float = Field(default=0.0, ge=0)
