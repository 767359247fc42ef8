"""Load context tracking across recursive file loads."""

from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class ContextFrame:
    """Saved caller position restored after a nested load."""

    current_file: str | None
    current_line: int
    required: bool


@dataclass
class LoadContext:
    """Mutable position of the loader within the configuration tree.

    Attributes:
        current_file: File currently being read (None before the root load).
        current_line: 1-based line number within current_file.
        required: Whether the file being loaded is mandatory.
        verbose: Emit progress lines; fixed for the whole run.
    """

    current_file: str | None = None
    current_line: int = 0
    required: bool = True
    verbose: bool = False
    _frames: list[ContextFrame] = field(default_factory=list, repr=False)

    @property
    def depth(self) -> int:
        """Number of files currently entered."""
        return len(self._frames)

    @contextmanager
    def descend(self, path: str, *, required: bool) -> Generator[None]:
        """Enter a nested file and restore the caller's position on exit.

        The caller's file, line and mandatory flag are restored on every
        exit path, including exceptions raised inside the block.

        Args:
            path: File being entered.
            required: Mandatory flag for the nested file.
        """
        self._frames.append(
            ContextFrame(self.current_file, self.current_line, self.required)
        )
        self.current_file = path
        self.current_line = 1
        self.required = required
        try:
            yield
        finally:
            frame = self._frames.pop()
            self.current_file = frame.current_file
            self.current_line = frame.current_line
            self.required = frame.required

    def advance(self) -> None:
        """Move to the next line of the current file."""
        self.current_line += 1
