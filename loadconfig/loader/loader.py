"""Recursive configuration loader."""

import sys
import time
import uuid
from pathlib import Path
from typing import TextIO

import structlog

from loadconfig.loader.constants import (
    COMPONENT_LOADER,
    CONFIG_TAG,
    SPECIAL_DIRECTORY_ENTRIES,
)
from loadconfig.loader.context import LoadContext
from loadconfig.loader.directives import resolve_directive
from loadconfig.loader.errors import (
    ErrorRecord,
    InvalidArgumentsError,
    LoadError,
    MissingRequiredFileError,
    NotAConfigFileError,
)
from loadconfig.loader.metrics import LoaderMetrics, MetricsRecorder
from loadconfig.loader.models import DirectiveAction, LineKind, LoadResult
from loadconfig.loader.parser import parse_line
from loadconfig.loader.state_machine import LoadState, LoadStateMachine
from loadconfig.variables.protocols import Expander, VariableStore


logger = structlog.get_logger()

_CONFIG_TAG_BYTES = CONFIG_TAG.encode("ascii")


class ConfigLoader:
    """Loads a tree of configuration files into a variable store.

    Each line is expanded, classified and dispatched in file order.
    ``@include``, ``@require`` and ``@includedir`` descend recursively;
    the caller's file, line and mandatory flag are restored after every
    descent. A failing line is logged and processing continues, and
    the file result is the most recent failure.

    Include cycles are not detected and recurse until Python's
    recursion limit is reached.
    """

    def __init__(
        self,
        store: VariableStore,
        expander: Expander | None = None,
        *,
        verbose: bool = False,
        progress: TextIO | None = None,
        metrics: MetricsRecorder | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            store: Store that receives variable assignments.
            expander: Line expander; defaults to a TemplateExpander over store.
            verbose: Write human-readable progress lines.
            progress: Stream for progress lines (default: stdout).
            metrics: Metrics recorder (default: LoaderMetrics singleton).
        """
        from loadconfig.variables.expander import TemplateExpander

        self._store = store
        self._expander = expander or TemplateExpander(store)
        self._verbose = verbose
        self._progress = progress
        self._metrics = metrics or LoaderMetrics.get_instance()
        self._state_machine = LoadStateMachine()
        self._context = LoadContext(verbose=verbose)
        self._log = logger.bind(component=COMPONENT_LOADER)
        self._files_loaded = 0
        self._assignments_applied = 0
        self._line_failures = 0

    @property
    def state(self) -> LoadState:
        """Get the state of the most recent run."""
        return self._state_machine.state

    @property
    def context(self) -> LoadContext:
        """Get the load context of the current or most recent run."""
        return self._context

    def load_configuration(
        self, root_path: str | Path, run_id: str | None = None
    ) -> LoadResult:
        """Load a configuration tree starting at a mandatory root file.

        Every call starts from a fresh context, so loading the same tree
        twice produces the same sequence of store writes.

        Args:
            root_path: Path of the root configuration file.
            run_id: Optional run identifier (generated if not provided).

        Returns:
            LoadResult describing the run and its last error, if any.

        Raises:
            InvalidArgumentsError: If root_path is empty.
        """
        root = str(root_path)
        if not root:
            raise InvalidArgumentsError("A root configuration file is required")

        run_id = run_id or str(uuid.uuid4())
        self._state_machine = LoadStateMachine()
        self._context = LoadContext(verbose=self._verbose)
        self._files_loaded = 0
        self._assignments_applied = 0
        self._line_failures = 0
        self._log = logger.bind(component=COMPONENT_LOADER, run_id=run_id)

        start_time = time.perf_counter()
        self._state_machine.transition(LoadState.LOADING)
        self._log.info("config_load_started", root_path=root, phase="LOADING")

        error = self.load_file(root, required=True)

        duration_ms = (time.perf_counter() - start_time) * 1000
        if error is None:
            self._state_machine.transition(LoadState.LOADED)
        else:
            self._state_machine.transition(LoadState.FAILED)

        result = LoadResult(
            run_id=run_id,
            root_path=root,
            success=error is None,
            error=None if error is None else ErrorRecord.from_exception(error),
            files_loaded=self._files_loaded,
            assignments_applied=self._assignments_applied,
            line_failures=self._line_failures,
            duration_ms=duration_ms,
        )
        self._log.info(
            "config_load_complete",
            phase=self._state_machine.state.name,
            success=result.success,
            files_loaded=result.files_loaded,
            assignments_applied=result.assignments_applied,
            line_failures=result.line_failures,
            duration_ms=round(duration_ms, 2),
        )
        return result

    def load_file(self, path: str, *, required: bool) -> LoadError | None:
        """Load one configuration file and everything it includes.

        Args:
            path: Path of the file to load.
            required: Whether the file must exist and be a config file.

        Returns:
            None on success or when an optional file was skipped,
            otherwise the last error encountered.
        """
        with self._context.descend(path, required=required):
            try:
                content = self._read_config(path)
            except MissingRequiredFileError as e:
                if not self._context.required:
                    self._metrics.record_file_skipped()
                    self._log.debug(
                        "optional_file_skipped",
                        file=path,
                        error_class=e.error_class.value,
                        reason=e.message,
                    )
                    return None
                self._log.error(
                    "required_file_missing",
                    file=path,
                    error_class=e.error_class.value,
                    error=e.message,
                )
                return e

            self._files_loaded += 1
            self._metrics.record_file_loaded()
            self._log.debug("config_file_loaded", file=path, depth=self._context.depth)

            error = self._process_content(content)
            if error is not None:
                self._log.error("config_file_failed", file=path)
            return error

    def _read_config(self, path: str) -> str:
        """Read a configuration file's content.

        Raises:
            MissingRequiredFileError: If the file cannot be read.
            NotAConfigFileError: If the content does not start with the
                @config marker or is not UTF-8 text.
        """
        try:
            data = Path(path).read_bytes()
        except (OSError, ValueError) as e:
            reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
            raise MissingRequiredFileError(path, reason=reason) from e

        if not data.startswith(_CONFIG_TAG_BYTES):
            raise NotAConfigFileError(path)

        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise NotAConfigFileError(path) from e

    def _process_content(self, content: str) -> LoadError | None:
        """Process file content line by line.

        A trailing line without a newline is processed like any other.

        Returns:
            The last line error, or None if every line succeeded.
        """
        last_error: LoadError | None = None

        for raw_line in content.split("\n"):
            try:
                self._process_line(raw_line)
            except LoadError as e:
                e.locate(self._context.current_file, self._context.current_line)
                self._line_failures += 1
                self._metrics.record_line_failure()
                self._log.error(
                    "config_line_failed",
                    file=self._context.current_file,
                    line=self._context.current_line,
                    error_class=e.error_class.value,
                    error=e.describe(),
                )
                last_error = e
            self._context.advance()

        return last_error

    def _process_line(self, raw_line: str) -> None:
        """Expand, classify and dispatch a single line."""
        self._metrics.record_line()
        expanded = self._expander.expand(raw_line)
        line = parse_line(expanded)

        if line.kind is LineKind.DIRECTIVE:
            self._dispatch_directive(line.keyword or "", line.argument or "")
        elif line.kind is LineKind.ASSIGNMENT:
            self._assign(line.name or "", line.value or "")

    def _dispatch_directive(self, keyword: str, argument: str) -> None:
        """Resolve a directive and perform its action.

        Raises:
            LoadError: If the directive is invalid or a nested load failed.
        """
        outcome = resolve_directive(keyword, argument)
        self._metrics.record_directive(keyword)

        if outcome.action is DirectiveAction.INFO:
            self._echo(f"Processing {outcome.target}")
            self._log.info(
                "config_info",
                file=self._context.current_file,
                info=outcome.target,
            )
            return

        if outcome.action is DirectiveAction.INCLUDE_DIRECTORY:
            self._include_directory(outcome.target)
            return

        self._echo(f"Including {outcome.target}")
        error = self.load_file(outcome.target, required=bool(outcome.required))
        if error is not None:
            raise error

    def _include_directory(self, dirname: str) -> None:
        """Load every entry of a directory as an optional file.

        Entry failures are logged and never fail the directive.
        """
        self._echo(f"Processing directory: {dirname}")

        try:
            entries = list(Path(dirname).iterdir())
        except OSError as e:
            self._log.warning(
                "config_directory_unreadable",
                directory=dirname,
                file=self._context.current_file,
                line=self._context.current_line,
                error=str(e),
            )
            return

        for entry in entries:
            if entry.name in SPECIAL_DIRECTORY_ENTRIES:
                continue
            error = self.load_file(str(entry), required=False)
            if error is not None:
                self._log.warning(
                    "config_directory_entry_failed",
                    directory=dirname,
                    entry=str(entry),
                    error_class=error.error_class.value,
                    error=error.describe(),
                )

    def _assign(self, name: str, value: str) -> None:
        """Write one variable assignment to the store.

        Raises:
            VariableNotFoundError: If the store does not know the name.
            VariableWriteError: If the store rejects the write.
        """
        self._echo(f"Setting {name} to {value}")
        self._store.set_variable(name, value)
        self._assignments_applied += 1
        self._metrics.record_assignment()

    def _echo(self, message: str) -> None:
        if self._context.verbose:
            stream = self._progress or sys.stdout
            stream.write(f"{message}\n")
