"""Recursive configuration loading engine."""

from loadconfig.loader.errors import (
    ErrorRecord,
    ExpansionError,
    InvalidArgumentsError,
    InvalidAssignmentError,
    LoadError,
    LoadErrorClass,
    MissingRequiredFileError,
    NotAConfigFileError,
    UnsupportedDirectiveError,
    VariableNotFoundError,
    VariableWriteError,
)
from loadconfig.loader.loader import ConfigLoader
from loadconfig.loader.models import LoadResult
from loadconfig.loader.state_machine import LoadState, LoadStateError


__all__ = [
    "ConfigLoader",
    "ErrorRecord",
    "ExpansionError",
    "InvalidArgumentsError",
    "InvalidAssignmentError",
    "LoadError",
    "LoadErrorClass",
    "LoadResult",
    "LoadState",
    "LoadStateError",
    "MissingRequiredFileError",
    "NotAConfigFileError",
    "UnsupportedDirectiveError",
    "VariableNotFoundError",
    "VariableWriteError",
]
