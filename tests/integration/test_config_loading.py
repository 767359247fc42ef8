"""Integration tests for recursive configuration loading."""

import io
from pathlib import Path

import pytest

from loadconfig.loader.errors import InvalidArgumentsError, LoadErrorClass
from loadconfig.loader.loader import ConfigLoader
from loadconfig.loader.metrics import LoaderMetrics, NullMetricsRecorder
from loadconfig.loader.state_machine import LoadState
from loadconfig.variables.memory import InMemoryVariableStore


class RecordingStore(InMemoryVariableStore):
    """Store that records the loader position at every write."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        super().__init__(initial)
        self.loader: ConfigLoader | None = None
        self.positions: list[tuple[str, str | None, int]] = []

    def set_variable(self, name: str, value: str) -> None:
        assert self.loader is not None
        context = self.loader.context
        self.positions.append((name, context.current_file, context.current_line))
        super().set_variable(name, value)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from an empty directory; include paths are relative."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write(path: Path | str, *lines: str, newline: bool = True) -> Path:
    """Write a configuration file from lines."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    content = "\n".join(lines)
    target.write_text(content + ("\n" if newline else ""), encoding="utf-8")
    return target


def make_loader(
    store: InMemoryVariableStore | None = None, **kwargs: object
) -> tuple[ConfigLoader, InMemoryVariableStore]:
    """Create a loader over an in-memory store with no-op metrics."""
    store = store or InMemoryVariableStore()
    loader = ConfigLoader(store, metrics=NullMetricsRecorder(), **kwargs)  # type: ignore[arg-type]
    if isinstance(store, RecordingStore):
        store.loader = loader
    return loader, store


class TestAssignments:
    """Tests for assignment processing."""

    @pytest.mark.integration
    def test_writes_every_assignment_in_order(self, workdir: Path) -> None:
        """Test that assignments reach the store once each, in file order."""
        write(
            "main.cfg",
            "@config Main system configuration",
            "",
            "# The main system configuration file",
            "/sys/network/hostname  MyHostName",
            "/sys/network/dhcp      1",
            "foo=bar",
            "spaced = value",
        )
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert result.error is None
        assert store.writes == [
            ("/sys/network/hostname", "MyHostName"),
            ("/sys/network/dhcp", "1"),
            ("foo", "bar"),
            ("spaced ", " value"),
        ]
        assert result.assignments_applied == 4
        assert result.files_loaded == 1
        assert loader.state == LoadState.LOADED

    @pytest.mark.integration
    def test_trailing_line_without_newline(self, workdir: Path) -> None:
        """Test that a final unterminated line is processed."""
        write("main.cfg", "@config x", "a 1", "b 2", newline=False)
        loader, store = make_loader()

        assert loader.load_configuration("main.cfg").success
        assert store.writes == [("a", "1"), ("b", "2")]

    @pytest.mark.integration
    def test_bad_line_does_not_abort_file(self, workdir: Path) -> None:
        """Test that processing continues after a failing line."""
        write("main.cfg", "@config x", "a 1", "lonely", "b 2")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert not result.success
        assert store.writes == [("a", "1"), ("b", "2")]
        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.INVALID_ASSIGNMENT
        assert (result.error.file, result.error.line) == ("main.cfg", 3)
        assert result.line_failures == 1
        assert loader.state == LoadState.FAILED

    @pytest.mark.integration
    def test_last_error_wins(self, workdir: Path) -> None:
        """Test that the file result is the most recent failure."""
        write("main.cfg", "@config x", "@bogus here", "ok 1", "=nameless")
        loader, _ = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.INVALID_ASSIGNMENT
        assert result.error.line == 4
        assert result.line_failures == 2

    @pytest.mark.integration
    def test_unknown_variable_in_strict_store(self, workdir: Path) -> None:
        """Test that store rejections are reported distinctly."""
        write("main.cfg", "@config x", "known 1", "unknown 2", "known 3")
        store = InMemoryVariableStore({"known": "0"}, strict=True)
        loader, _ = make_loader(store)

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.VARIABLE_NOT_FOUND
        assert store.writes == [("known", "1"), ("known", "3")]


class TestIncludes:
    """Tests for @include and @require."""

    @pytest.mark.integration
    def test_nested_files_are_processed_depth_first(self, workdir: Path) -> None:
        """Test that included assignments land between the caller's lines."""
        write("main.cfg", "@config main", "a 1", "@include sub.cfg", "b 2")
        write("sub.cfg", "@config sub", "c 3", "@require deeper.cfg", "d 4")
        write("deeper.cfg", "@config deeper", "e 5")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert [name for name, _ in store.writes] == ["a", "c", "e", "d", "b"]
        assert result.files_loaded == 3

    @pytest.mark.integration
    def test_missing_optional_include_is_ignored(self, workdir: Path) -> None:
        """Test that @include of a missing file succeeds."""
        write("main.cfg", "@config main", "a 1", "@include missing.cfg", "b 2")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert store.writes == [("a", "1"), ("b", "2")]

    @pytest.mark.integration
    def test_missing_required_include_fails(self, workdir: Path) -> None:
        """Test that @require of a missing file fails but siblings still load."""
        write("main.cfg", "@config main", "a 1", "@require missing.cfg", "b 2")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert not result.success
        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.MISSING_REQUIRED_FILE
        assert (result.error.file, result.error.line) == ("main.cfg", 3)
        assert store.writes == [("a", "1"), ("b", "2")]

    @pytest.mark.integration
    def test_non_config_file_optional_is_skipped(self, workdir: Path) -> None:
        """Test that an optional file without the marker is skipped silently."""
        write("main.cfg", "@config main", "@include notes.txt", "a 1")
        write("notes.txt", "x 1", "y 2")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert store.writes == [("a", "1")]

    @pytest.mark.integration
    def test_non_config_file_required_fails(self, workdir: Path) -> None:
        """Test that a required file without the marker fails."""
        write("main.cfg", "@config main", "@require notes.txt", "a 1")
        write("notes.txt", "", "@config too late", "x 1")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.NOT_A_CONFIG_FILE
        assert store.writes == [("a", "1")]

    @pytest.mark.integration
    def test_required_directory_fails(self, workdir: Path) -> None:
        """Test that requiring a directory is a missing required file."""
        (workdir / "conf.d").mkdir()
        write("main.cfg", "@config main", "@require conf.d")
        loader, _ = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.MISSING_REQUIRED_FILE

    @pytest.mark.integration
    def test_nested_line_error_keeps_its_position(self, workdir: Path) -> None:
        """Test that an error inside an included file names that file."""
        write("main.cfg", "@config main", "@include sub.cfg", "a 1")
        write("sub.cfg", "@config sub", "ok 1", "broken")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.INVALID_ASSIGNMENT
        assert (result.error.file, result.error.line) == ("sub.cfg", 3)
        assert store.writes == [("ok", "1"), ("a", "1")]

    @pytest.mark.integration
    def test_optional_flag_does_not_leak_into_require(self, workdir: Path) -> None:
        """Test that a @require inside an optional file is still mandatory."""
        write("main.cfg", "@config main", "@include opt.cfg")
        write("opt.cfg", "@config opt", "@require missing.cfg")
        loader, _ = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.MISSING_REQUIRED_FILE
        assert (result.error.file, result.error.line) == ("opt.cfg", 2)

    @pytest.mark.integration
    def test_required_flag_does_not_leak_into_include(self, workdir: Path) -> None:
        """Test that an @include inside a required file stays optional."""
        write("main.cfg", "@config main", "@require req.cfg", "@include gone.cfg")
        write("req.cfg", "@config req", "@include missing.cfg", "r 1")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert store.writes == [("r", "1")]


class TestIncludeDirectory:
    """Tests for @includedir."""

    @pytest.mark.integration
    def test_loads_every_entry_and_ignores_failures(self, workdir: Path) -> None:
        """Test per-entry optional semantics."""
        write("conf.d/good.cfg", "@config good", "good 1")
        write("conf.d/bad.cfg", "@config bad", "bad 1", "@nonsense", "bad 2")
        write("conf.d/readme.txt", "not a config")
        (workdir / "conf.d" / "nested").mkdir()
        write("main.cfg", "@config main", "@includedir conf.d", "after 1")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert set(store.writes) == {
            ("good", "1"),
            ("bad", "1"),
            ("bad", "2"),
            ("after", "1"),
        }
        assert store.writes[-1] == ("after", "1")
        assert result.files_loaded == 3

    @pytest.mark.integration
    def test_missing_directory_is_ignored(self, workdir: Path) -> None:
        """Test that an unreadable directory does not fail the directive."""
        write("main.cfg", "@config main", "@includedir nowhere", "a 1")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert store.writes == [("a", "1")]

    @pytest.mark.integration
    def test_directory_path_from_variable(self, workdir: Path) -> None:
        """Test that directive arguments are expanded before dispatch."""
        write("extra/one.cfg", "@config one", "one ${base}")
        write("main.cfg", "@config main", "@includedir ${confdir}")
        store = InMemoryVariableStore({"confdir": "extra", "base": "/opt"})
        loader, _ = make_loader(store)

        result = loader.load_configuration("main.cfg")

        assert result.success
        assert store.writes == [("one", "/opt")]


class TestExpansion:
    """Tests for variable expansion during loading."""

    @pytest.mark.integration
    def test_values_written_earlier_are_visible(self, workdir: Path) -> None:
        """Test that later lines can reference values set earlier."""
        write("main.cfg", "@config main", "host box", "fqdn ${host}.local")
        loader, store = make_loader()

        assert loader.load_configuration("main.cfg").success
        assert store.get_variable("fqdn") == "box.local"

    @pytest.mark.integration
    def test_expansion_failure_fails_only_that_line(self, workdir: Path) -> None:
        """Test that an unknown reference is a per-line expansion error."""
        write("main.cfg", "@config main", "a ${undefined}", "b 2")
        loader, store = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.EXPANSION_ERROR
        assert result.error.line == 2
        assert store.writes == [("b", "2")]


class TestRootFile:
    """Tests for the root file of a load."""

    @pytest.mark.integration
    def test_missing_root_fails(self, workdir: Path) -> None:
        """Test that the root file is always mandatory."""
        loader, _ = make_loader()

        result = loader.load_configuration("absent.cfg")

        assert not result.success
        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.MISSING_REQUIRED_FILE
        assert result.error.file is None
        assert loader.state == LoadState.FAILED

    @pytest.mark.integration
    def test_root_without_marker_fails(self, workdir: Path) -> None:
        """Test that a root file must start with @config."""
        write("main.cfg", "# comment first", "@config main", "a 1")
        loader, store = make_loader()

        result = loader.load_configuration(workdir / "main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.NOT_A_CONFIG_FILE
        assert store.writes == []

    @pytest.mark.integration
    def test_root_not_utf8_fails(self, workdir: Path) -> None:
        """Test that undecodable content is not a configuration file."""
        (workdir / "main.cfg").write_bytes(b"@config x\nname \xff\xfe\n")
        loader, _ = make_loader()

        result = loader.load_configuration("main.cfg")

        assert result.error is not None
        assert result.error.error_class == LoadErrorClass.NOT_A_CONFIG_FILE

    @pytest.mark.integration
    def test_empty_root_path(self) -> None:
        """Test that an empty root path is rejected."""
        loader, _ = make_loader()
        with pytest.raises(InvalidArgumentsError):
            loader.load_configuration("")


class TestContextRestore:
    """Tests for file and line tracking across recursion."""

    @pytest.mark.integration
    def test_positions_after_nested_loads(self, workdir: Path) -> None:
        """Test that the caller's file and line survive nested loads."""
        write(
            "main.cfg",
            "@config main",
            "m1 1",
            "@include sub.cfg",
            "m2 2",
            "@require missing.cfg",
            "m3 3",
        )
        write("sub.cfg", "@config sub", "", "s1 1", "@include deep.cfg", "s2 2")
        write("deep.cfg", "@config deep", "bad line here=", "d1 1")
        store = RecordingStore()
        loader, _ = make_loader(store)

        loader.load_configuration("main.cfg")

        assert store.positions == [
            ("m1", "main.cfg", 2),
            ("s1", "sub.cfg", 3),
            ("d1", "deep.cfg", 3),
            ("s2", "sub.cfg", 5),
            ("m2", "main.cfg", 4),
            ("m3", "main.cfg", 6),
        ]
        assert loader.context.current_file is None
        assert loader.context.depth == 0

    @pytest.mark.integration
    def test_loading_twice_repeats_the_same_writes(self, workdir: Path) -> None:
        """Test that a loader keeps no state between runs."""
        write("main.cfg", "@config main", "a 1", "@include sub.cfg", "bad", "b 2")
        write("sub.cfg", "@config sub", "c 3")
        loader, store = make_loader()

        first = loader.load_configuration("main.cfg", run_id="run-1")
        writes_after_first = store.writes
        second = loader.load_configuration("main.cfg", run_id="run-2")

        assert store.writes == writes_after_first * 2
        assert first.error == second.error
        assert first.line_failures == second.line_failures == 1
        assert second.run_id == "run-2"


class TestProgressAndMetrics:
    """Tests for verbose output and metrics recording."""

    @pytest.mark.integration
    def test_verbose_progress_lines(self, workdir: Path) -> None:
        """Test the human-readable progress stream."""
        write("conf.d/x.cfg", "@config Extra")
        write(
            "main.cfg",
            "@config Main system",
            "@include sub.cfg",
            "@includedir conf.d",
            "a 1",
        )
        write("sub.cfg", "@config Sub")
        output = io.StringIO()
        loader, _ = make_loader(verbose=True, progress=output)

        loader.load_configuration("main.cfg")

        assert output.getvalue().splitlines() == [
            "Processing Main system",
            "Including sub.cfg",
            "Processing Sub",
            "Processing directory: conf.d",
            "Processing Extra",
            "Setting a to 1",
        ]

    @pytest.mark.integration
    def test_quiet_by_default(self, workdir: Path) -> None:
        """Test that no progress is written unless verbose."""
        write("main.cfg", "@config main", "a 1")
        output = io.StringIO()
        loader, _ = make_loader(progress=output)

        loader.load_configuration("main.cfg")

        assert output.getvalue() == ""

    @pytest.mark.integration
    def test_metrics_recorded(self, workdir: Path) -> None:
        """Test that the loader reports to its metrics recorder."""
        write("main.cfg", "@config main", "@include gone.cfg", "a 1", "oops")
        metrics = LoaderMetrics()
        loader = ConfigLoader(InMemoryVariableStore(), metrics=metrics)

        loader.load_configuration("main.cfg")

        assert metrics.files_loaded_total == 1
        assert metrics.files_skipped_total == 1
        assert metrics.assignments_total == 1
        assert metrics.line_failures_total == 1
        assert metrics.lines_total == 5
        assert metrics.directives_total == {"@config": 1, "@include": 1}
