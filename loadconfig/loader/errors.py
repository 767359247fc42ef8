"""Error types for the configuration loader."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class LoadErrorClass(str, Enum):
    """Classification of configuration load errors.

    - INVALID_ARGUMENTS: A required input was absent or empty
    - MISSING_REQUIRED_FILE: A mandatory file is absent or unreadable
    - NOT_A_CONFIG_FILE: A mandatory file lacks the leading @config marker
    - UNSUPPORTED_DIRECTIVE: Unknown @ keyword
    - INVALID_ASSIGNMENT: Malformed name/value line
    - EXPANSION_ERROR: Variable substitution failed for a line
    - VARIABLE_NOT_FOUND: The store does not know the variable
    - VARIABLE_WRITE_FAILED: The store rejected the write
    """

    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    MISSING_REQUIRED_FILE = "MISSING_REQUIRED_FILE"
    NOT_A_CONFIG_FILE = "NOT_A_CONFIG_FILE"
    UNSUPPORTED_DIRECTIVE = "UNSUPPORTED_DIRECTIVE"
    INVALID_ASSIGNMENT = "INVALID_ASSIGNMENT"
    EXPANSION_ERROR = "EXPANSION_ERROR"
    VARIABLE_NOT_FOUND = "VARIABLE_NOT_FOUND"
    VARIABLE_WRITE_FAILED = "VARIABLE_WRITE_FAILED"


class LoadError(Exception):
    """Base exception for configuration load errors.

    The file and line are filled in by the loader when the error is
    recorded, so collaborators can raise without knowing the position.
    """

    error_class: LoadErrorClass = LoadErrorClass.INVALID_ARGUMENTS

    def __init__(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize the load error.

        Args:
            message: Human-readable error message.
            file: Configuration file being processed.
            line: 1-based line number within the file.
        """
        super().__init__(message)
        self.message = message
        self.file = file
        self.line = line

    def locate(self, file: str | None, line: int | None) -> "LoadError":
        """Attach a position to the error unless it already has one.

        Args:
            file: Configuration file being processed.
            line: 1-based line number within the file.

        Returns:
            The error itself.
        """
        if self.file is None:
            self.file = file
            self.line = line
        return self

    def describe(self) -> str:
        """Render the error as ``<message> in <file> on line <n>``."""
        if self.file is None:
            return self.message
        return f"{self.message} in {self.file} on line {self.line}"

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "file": self.file,
            "line": self.line,
        }


class InvalidArgumentsError(LoadError):
    """A directive or entry point was given an empty argument."""

    error_class = LoadErrorClass.INVALID_ARGUMENTS


class MissingRequiredFileError(LoadError):
    """A mandatory configuration file could not be read."""

    error_class = LoadErrorClass.MISSING_REQUIRED_FILE

    def __init__(self, path: str, reason: str | None = None) -> None:
        """Initialize the error.

        Args:
            path: Path of the missing file.
            reason: Optional description of the underlying failure.
        """
        message = f"Required file {path} could not be loaded"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.path = path


class NotAConfigFileError(MissingRequiredFileError):
    """A mandatory file does not start with the @config marker."""

    error_class = LoadErrorClass.NOT_A_CONFIG_FILE

    def __init__(self, path: str) -> None:
        """Initialize the error.

        Args:
            path: Path of the rejected file.
        """
        super().__init__(path, reason="not a configuration file")


class UnsupportedDirectiveError(LoadError):
    """A directive line used an unknown keyword."""

    error_class = LoadErrorClass.UNSUPPORTED_DIRECTIVE

    def __init__(self, keyword: str) -> None:
        """Initialize the error.

        Args:
            keyword: The unrecognized keyword, including the @ prefix.
        """
        super().__init__(f"Unknown directive {keyword!r}")
        self.keyword = keyword


class InvalidAssignmentError(LoadError):
    """An assignment line is missing its name or its value."""

    error_class = LoadErrorClass.INVALID_ASSIGNMENT


class ExpansionError(LoadError):
    """Variable expansion failed for a line."""

    error_class = LoadErrorClass.EXPANSION_ERROR


class VariableNotFoundError(LoadError):
    """The variable store does not know the assigned name."""

    error_class = LoadErrorClass.VARIABLE_NOT_FOUND

    def __init__(self, name: str) -> None:
        """Initialize the error.

        Args:
            name: The unknown variable name.
        """
        super().__init__(f"Variable not found: {name}")
        self.name = name


class VariableWriteError(LoadError):
    """The variable store failed to write a value."""

    error_class = LoadErrorClass.VARIABLE_WRITE_FAILED

    def __init__(self, name: str, reason: str) -> None:
        """Initialize the error.

        Args:
            name: Variable being written.
            reason: Description of the store failure.
        """
        super().__init__(f"Variable assignment failed for {name}: {reason}")
        self.name = name


class ErrorRecord(BaseModel):
    """Serializable record of a load error for results and reporting."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error_class: LoadErrorClass = Field(description="Error classification")
    message: Annotated[str, Field(min_length=1, description="Error message")]
    file: str | None = Field(default=None, description="Configuration file")
    line: int | None = Field(default=None, ge=1, description="Line number")

    @classmethod
    def from_exception(cls, error: LoadError) -> "ErrorRecord":
        """Create an ErrorRecord from a LoadError exception.

        Args:
            error: The exception to convert.

        Returns:
            ErrorRecord instance.
        """
        return cls(
            error_class=error.error_class,
            message=error.message,
            file=error.file,
            line=error.line,
        )
