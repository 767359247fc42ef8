"""In-memory variable store."""

from loadconfig.loader.errors import VariableNotFoundError


class InMemoryVariableStore:
    """Dictionary-backed variable store.

    Keeps an ordered log of every successful write so callers can
    inspect exactly which assignments a load produced.
    """

    def __init__(
        self,
        initial: dict[str, str] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        """Initialize the store.

        Args:
            initial: Variables declared before loading.
            strict: Reject writes to variables that were never declared.
        """
        self._values: dict[str, str] = dict(initial or {})
        self._strict = strict
        self._writes: list[tuple[str, str]] = []

    @property
    def writes(self) -> list[tuple[str, str]]:
        """Get the (name, value) writes in the order they happened."""
        return self._writes.copy()

    def get_variable(self, name: str) -> str | None:
        """Look up a variable value."""
        return self._values.get(name)

    def declare(self, name: str, value: str) -> None:
        """Create or overwrite a variable regardless of strict mode.

        Declarations are not recorded in the write log.
        """
        self._values[name] = value

    def set_variable(self, name: str, value: str) -> None:
        """Write a variable value.

        Raises:
            VariableNotFoundError: If strict and the name is not declared.
        """
        if self._strict and name not in self._values:
            raise VariableNotFoundError(name)
        self._values[name] = value
        self._writes.append((name, value))

    def items(self) -> list[tuple[str, str]]:
        """Get all variables sorted by name."""
        return sorted(self._values.items())
