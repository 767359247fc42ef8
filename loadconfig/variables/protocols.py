"""Protocol interfaces for the loader's external collaborators."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class VariableStore(Protocol):
    """Protocol for stores that hold named configuration variables.

    Any store implementing ``get_variable`` and ``set_variable`` can
    receive assignments from the loader.
    """

    def get_variable(self, name: str) -> str | None:
        """Look up a variable value.

        Args:
            name: Variable name.

        Returns:
            The current value, or None if the variable is unknown.
        """
        ...

    def set_variable(self, name: str, value: str) -> None:
        """Write a variable value.

        Args:
            name: Variable name.
            value: New value.

        Raises:
            VariableNotFoundError: If the store does not know the name.
            VariableWriteError: If the store fails to write the value.
        """
        ...


@runtime_checkable
class Expander(Protocol):
    """Protocol for variable expansion of raw configuration lines."""

    def expand(self, text: str) -> str:
        """Substitute ``${name}`` references in a line.

        Args:
            text: Raw line without the trailing newline.

        Returns:
            The fully expanded line.

        Raises:
            ExpansionError: If the line cannot be expanded.
        """
        ...
