"""Error models for network definition diagnostics."""

from netdef.models.errors import (
    ErrorDomain,
    ErrorHandle,
    ErrorKind,
    FormattedError,
    NetworkDefinitionError,
    PositionMark,
)

__all__ = [
    "ErrorDomain",
    "ErrorHandle",
    "ErrorKind",
    "FormattedError",
    "NetworkDefinitionError",
    "PositionMark",
]
