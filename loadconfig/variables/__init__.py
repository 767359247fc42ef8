"""Variable stores and expansion used by the configuration loader."""

from loadconfig.variables.expander import TemplateExpander
from loadconfig.variables.memory import InMemoryVariableStore
from loadconfig.variables.protocols import Expander, VariableStore
from loadconfig.variables.sqlite import SqliteVariableStore


__all__ = [
    "Expander",
    "InMemoryVariableStore",
    "SqliteVariableStore",
    "TemplateExpander",
    "VariableStore",
]
