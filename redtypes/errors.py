"""Error kinds and the error type raised throughout the package."""

from __future__ import annotations

import enum
import os
import re


class ErrorKind(enum.Enum):
    """Every kind of error the package can report."""

    RESPONSE_ERROR = enum.auto()
    AUTHENTICATION_FAILED = enum.auto()
    TYPE_ERROR = enum.auto()
    EXEC_ABORT_ERROR = enum.auto()
    BUSY_LOADING_ERROR = enum.auto()
    NO_SCRIPT_ERROR = enum.auto()
    INVALID_CLIENT_CONFIG = enum.auto()
    MOVED = enum.auto()
    ASK = enum.auto()
    TRY_AGAIN = enum.auto()
    CLUSTER_DOWN = enum.auto()
    CROSS_SLOT = enum.auto()
    MASTER_DOWN = enum.auto()
    IO_ERROR = enum.auto()
    CLIENT_ERROR = enum.auto()
    EXTENSION_ERROR = enum.auto()
    READ_ONLY = enum.auto()


_CODES = {
    ErrorKind.RESPONSE_ERROR: "ERR",
    ErrorKind.EXEC_ABORT_ERROR: "EXECABORT",
    ErrorKind.BUSY_LOADING_ERROR: "LOADING",
    ErrorKind.NO_SCRIPT_ERROR: "NOSCRIPT",
    ErrorKind.MOVED: "MOVED",
    ErrorKind.ASK: "ASK",
    ErrorKind.TRY_AGAIN: "TRYAGAIN",
    ErrorKind.CLUSTER_DOWN: "CLUSTERDOWN",
    ErrorKind.CROSS_SLOT: "CROSSSLOT",
    ErrorKind.MASTER_DOWN: "MASTERDOWN",
    ErrorKind.READ_ONLY: "READONLY",
}

_CATEGORIES = {
    ErrorKind.RESPONSE_ERROR: "response error",
    ErrorKind.AUTHENTICATION_FAILED: "authentication failed",
    ErrorKind.TYPE_ERROR: "type error",
    ErrorKind.EXEC_ABORT_ERROR: "script execution aborted",
    ErrorKind.BUSY_LOADING_ERROR: "busy loading",
    ErrorKind.NO_SCRIPT_ERROR: "no script",
    ErrorKind.INVALID_CLIENT_CONFIG: "invalid client config",
    ErrorKind.MOVED: "key moved",
    ErrorKind.ASK: "key moved (ask)",
    ErrorKind.TRY_AGAIN: "try again",
    ErrorKind.CLUSTER_DOWN: "cluster down",
    ErrorKind.CROSS_SLOT: "cross-slot",
    ErrorKind.MASTER_DOWN: "master down",
    ErrorKind.IO_ERROR: "I/O error",
    ErrorKind.EXTENSION_ERROR: "extension error",
    ErrorKind.CLIENT_ERROR: "client error",
    ErrorKind.READ_ONLY: "read-only",
}

_CLUSTER_KINDS = frozenset(
    {ErrorKind.MOVED, ErrorKind.ASK, ErrorKind.TRY_AGAIN, ErrorKind.CLUSTER_DOWN}
)

_ASCII_WHITESPACE = re.compile(r"[ \t\n\x0c\r]+")
_SLOT = re.compile(r"\+?[0-9]+")
_MAX_SLOT = 0xFFFF


class RedisError(Exception):
    """A failure reported by the server or detected by the client."""

    def __init__(self, kind: ErrorKind, description: str, detail: str | None = None):
        super().__init__(kind, description, detail)
        self.kind = kind
        self.description = description
        self.detail = detail
        self.io_error: OSError | None = None
        self._extension_code: str | None = None

    def __str__(self) -> str:
        if self.io_error is not None:
            return str(self.io_error)
        if self.detail is None:
            return self.description
        if self._extension_code is not None:
            return f"{self._extension_code}: {self.detail}"
        return f"{self.description}: {self.detail}"

    def __repr__(self) -> str:
        return f"RedisError({self.kind.name}, {str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RedisError):
            return NotImplemented
        if self is other:
            return True
        if self.io_error is not None or other.io_error is not None:
            return False
        if self._extension_code is not None or other._extension_code is not None:
            return self._extension_code == other._extension_code
        return self.kind == other.kind and (self.detail is None) == (other.detail is None)

    def __hash__(self) -> int:
        return hash(self.kind)

    def code(self) -> str | None:
        """Return the raw error code, if there is one."""
        known = _CODES.get(self.kind)
        if known is not None:
            return known
        return self._extension_code

    def category(self) -> str:
        """Return the name of the error category for display."""
        return _CATEGORIES[self.kind]

    def is_io_error(self) -> bool:
        """Whether this failure wraps an operating-system I/O error."""
        return self.io_error is not None

    def is_cluster_error(self) -> bool:
        """Whether this is one of the cluster redirection or state errors."""
        return self.kind in _CLUSTER_KINDS

    def is_connection_refusal(self) -> bool:
        """Whether the connection was refused (or a unix socket is missing)."""
        err = self.io_error
        if err is None:
            return False
        if isinstance(err, ConnectionRefusedError):
            return True
        return isinstance(err, FileNotFoundError) and os.name == "posix"

    def is_timeout(self) -> bool:
        """Whether the error was caused by an I/O time-out."""
        return isinstance(self.io_error, (TimeoutError, BlockingIOError))

    def is_connection_dropped(self) -> bool:
        """Whether the error was caused by a dropped connection."""
        return isinstance(self.io_error, (BrokenPipeError, ConnectionResetError))

    def redirect_node(self) -> tuple[str, int] | None:
        """Return ``(address, slot)`` for MOVED and ASK errors."""
        if self.kind not in (ErrorKind.ASK, ErrorKind.MOVED) or self.detail is None:
            return None
        parts = [p for p in _ASCII_WHITESPACE.split(self.detail) if p]
        if len(parts) < 2 or not _SLOT.fullmatch(parts[0]):
            return None
        slot = int(parts[0])
        if slot > _MAX_SLOT:
            return None
        return parts[1], slot


def from_io_error(err: OSError) -> RedisError:
    """Wrap an operating-system error in a :class:`RedisError`."""
    error = RedisError(ErrorKind.IO_ERROR, str(err) or type(err).__name__)
    error.io_error = err
    error.__cause__ = err
    return error


def make_extension_error(code: str, detail: str | None = None) -> RedisError:
    """Build an error for a server error code the package does not know."""
    if detail is None:
        detail = "Unknown extension error encountered"
    error = RedisError(ErrorKind.EXTENSION_ERROR, "extension error", detail)
    error._extension_code = code
    return error