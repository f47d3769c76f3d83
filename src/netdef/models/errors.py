"""Error models: position marks, tagged error kinds and the error slot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("netdef.errors")


class PositionMark(BaseModel):
    """0-based line/column locating a character in source text."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(ge=0)
    column: int = Field(ge=0)


class ErrorDomain(IntEnum):
    PARSER = 1
    VALIDATION = 2


class ErrorKind(Enum):
    """Tagged failure classes, each bound to its wire ``(domain, code)`` pair."""

    INVALID_YAML = (ErrorDomain.PARSER, 0)
    INVALID_CONFIG = (ErrorDomain.PARSER, 1)
    CONFIG_GENERIC = (ErrorDomain.VALIDATION, 0)
    CONFIG_VALIDATION = (ErrorDomain.VALIDATION, 1)

    @property
    def domain(self) -> ErrorDomain:
        return self.value[0]

    @property
    def code(self) -> int:
        return self.value[1]

    @property
    def error_code(self) -> int:
        """Domain in the high 32 bits, code in the low 32 bits."""
        return (int(self.domain) << 32) | (self.code & 0xFFFFFFFF)

    @classmethod
    def from_error_code(cls, value: int) -> ErrorKind:
        for kind in cls:
            if kind.error_code == value:
                return kind
        raise ValueError(f"Unknown error code 0x{value:016x}")


class FormattedError(BaseModel):
    """A fully rendered diagnostic, built in one step and never amended."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str

    @property
    def domain(self) -> ErrorDomain:
        return self.kind.domain

    @property
    def code(self) -> int:
        return self.kind.code

    @property
    def error_code(self) -> int:
        return self.kind.error_code

    def copy_message(self, buffer: bytearray, capacity: int | None = None) -> int:
        """Copy the UTF-8 message into ``buffer`` as a NUL-terminated string.

        At most ``capacity`` bytes are written (``len(buffer)`` when omitted).
        The message is truncated on a character boundary when it does not
        fit. Returns the number of bytes written, terminator included.
        """
        limit = len(buffer) if capacity is None else min(capacity, len(buffer))
        if limit <= 0:
            return 0
        data = self.message.encode("utf-8")
        if len(data) > limit - 1:
            data = data[: limit - 1].decode("utf-8", errors="ignore").encode("utf-8")
        written = len(data) + 1
        buffer[:written] = data + b"\0"
        return written

    def __str__(self) -> str:
        return self.message


class NetworkDefinitionError(Exception):
    """Raised when a network definition cannot be loaded."""

    def __init__(self, error: FormattedError) -> None:
        super().__init__(error.message)
        self.error = error


@dataclass
class ErrorHandle:
    """Caller-owned slot receiving at most one ``FormattedError``."""

    error: FormattedError | None = None

    def __bool__(self) -> bool:
        return self.error is not None

    def set(self, error: FormattedError) -> None:
        if self.error is not None:
            logger.warning(
                "Error slot already holds %s; discarding: %s",
                self.error.kind.name,
                error.message,
            )
            return
        self.error = error

    def clear(self) -> None:
        self.error = None

    def copy_message(self, buffer: bytearray, capacity: int | None = None) -> int:
        if self.error is None:
            return 0
        return self.error.copy_message(buffer, capacity)

    def error_code(self) -> int:
        if self.error is None:
            raise ValueError("No error set")
        return self.error.error_code

    def take(self) -> FormattedError:
        """Return the stored error and leave the slot empty."""
        if self.error is None:
            raise ValueError("No error set")
        error, self.error = self.error, None
        return error

    def raise_if_set(self) -> None:
        if self.error is not None:
            raise NetworkDefinitionError(self.error)
