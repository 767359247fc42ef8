"""Variable expansion for configuration lines."""

import re

from loadconfig.loader.constants import DEFAULT_WORK_BUFFER_SIZE
from loadconfig.loader.errors import ExpansionError
from loadconfig.variables.protocols import VariableStore


VARIABLE_REFERENCE = re.compile(r"\$\{([^}]*)\}")


class TemplateExpander:
    """Replaces ``${name}`` references with values from a variable store.

    The expanded line must fit in ``max_length`` characters, mirroring
    the fixed work buffer an expansion is written into.
    """

    def __init__(
        self,
        store: VariableStore,
        max_length: int = DEFAULT_WORK_BUFFER_SIZE,
    ) -> None:
        """Initialize the expander.

        Args:
            store: Store used to look up referenced variables.
            max_length: Maximum length of an expanded line.

        Raises:
            ValueError: If max_length is not positive.
        """
        if max_length <= 0:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self._store = store
        self._max_length = max_length

    @property
    def max_length(self) -> int:
        """Get the maximum expanded line length."""
        return self._max_length

    def expand(self, text: str) -> str:
        """Substitute ``${name}`` references in a line.

        Args:
            text: Raw line without the trailing newline.

        Returns:
            The expanded line.

        Raises:
            ExpansionError: If a referenced variable is unknown or the
                result does not fit the work buffer.
        """

        def _substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            value = self._store.get_variable(name)
            if value is None:
                raise ExpansionError(f"Cannot expand unknown variable ${{{name}}}")
            return value

        expanded = VARIABLE_REFERENCE.sub(_substitute, text)
        if len(expanded) > self._max_length:
            raise ExpansionError(
                f"Expanded line is {len(expanded)} characters, "
                f"work buffer holds {self._max_length}"
            )
        return expanded
