"""Metrics collection for the configuration loader."""

from dataclasses import dataclass, field
from typing import ClassVar, Protocol


class MetricsRecorder(Protocol):
    """Protocol for metrics recording.

    This protocol defines the interface for recording loader metrics,
    enabling dependency injection and improved testability.
    """

    def record_file_loaded(self) -> None:
        """Record a configuration file that was read and processed."""
        ...

    def record_file_skipped(self) -> None:
        """Record an optional file that was missing or not a config file."""
        ...

    def record_line(self) -> None:
        """Record a processed line."""
        ...

    def record_assignment(self) -> None:
        """Record a successful variable assignment."""
        ...

    def record_line_failure(self) -> None:
        """Record a line that failed to process."""
        ...

    def record_directive(self, keyword: str) -> None:
        """Record a dispatched directive."""
        ...


@dataclass
class NullMetricsRecorder:
    """No-op metrics recorder for testing."""

    def record_file_loaded(self) -> None:
        """No-op."""

    def record_file_skipped(self) -> None:
        """No-op."""

    def record_line(self) -> None:
        """No-op."""

    def record_assignment(self) -> None:
        """No-op."""

    def record_line_failure(self) -> None:
        """No-op."""

    def record_directive(self, keyword: str) -> None:  # noqa: ARG002
        """No-op."""


@dataclass
class LoaderMetrics:
    """Metrics for configuration loading.

    Attributes:
        files_loaded_total: Configuration files read and processed.
        files_skipped_total: Optional files skipped as missing or invalid.
        lines_total: Lines processed, including blanks and comments.
        assignments_total: Variable assignments written to the store.
        line_failures_total: Lines that failed to process.
        directives_total: Dispatched directives by keyword.
    """

    files_loaded_total: int = 0
    files_skipped_total: int = 0
    lines_total: int = 0
    assignments_total: int = 0
    line_failures_total: int = 0
    directives_total: dict[str, int] = field(default_factory=dict)

    _instance: ClassVar["LoaderMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "LoaderMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_file_loaded(self) -> None:
        """Record a loaded file."""
        self.files_loaded_total += 1

    def record_file_skipped(self) -> None:
        """Record a skipped optional file."""
        self.files_skipped_total += 1

    def record_line(self) -> None:
        """Record a processed line."""
        self.lines_total += 1

    def record_assignment(self) -> None:
        """Record a variable assignment."""
        self.assignments_total += 1

    def record_line_failure(self) -> None:
        """Record a failed line."""
        self.line_failures_total += 1

    def record_directive(self, keyword: str) -> None:
        """Record a dispatched directive.

        Args:
            keyword: Directive keyword including the @ prefix.
        """
        self.directives_total[keyword] = self.directives_total.get(keyword, 0) + 1

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "files_loaded_total": self.files_loaded_total,
            "files_skipped_total": self.files_skipped_total,
            "lines_total": self.lines_total,
            "assignments_total": self.assignments_total,
            "line_failures_total": self.line_failures_total,
            "directives_total": dict(self.directives_total),
        }
