"""Option builders for the stream commands."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .args import to_redis_args


def _usize(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


def _num(value: int) -> bytes:
    return str(value).encode("ascii")


@dataclass(frozen=True)
class StreamMaxlen:
    """The ``MAXLEN [= | ~] count`` argument, exact or approximate."""

    count: int
    approx: bool = False

    def __post_init__(self) -> None:
        _usize("count", self.count)

    @classmethod
    def equals(cls, count: int) -> StreamMaxlen:
        """Trim to exactly ``count`` entries."""
        return cls(count, approx=False)

    @classmethod
    def approximate(cls, count: int) -> StreamMaxlen:
        """Trim to about ``count`` entries."""
        return cls(count, approx=True)

    def redis_args(self) -> list[bytes]:
        """The command arguments this option stands for."""
        return [b"MAXLEN", b"~" if self.approx else b"=", _num(self.count)]


@dataclass(frozen=True)
class StreamClaimOptions:
    """Options for XCLAIM. Each builder method returns a new set of options."""

    idle_ms: int | None = None
    time_ms: int | None = None
    retry_count: int | None = None
    force: bool = False
    justid: bool = False

    def idle(self, ms: int) -> StreamClaimOptions:
        """Set ``IDLE <milliseconds>``."""
        return replace(self, idle_ms=_usize("ms", ms))

    def time(self, ms_time: int) -> StreamClaimOptions:
        """Set ``TIME <mstime>``."""
        return replace(self, time_ms=_usize("ms_time", ms_time))

    def retry(self, count: int) -> StreamClaimOptions:
        """Set ``RETRYCOUNT <count>``."""
        return replace(self, retry_count=_usize("count", count))

    def with_force(self) -> StreamClaimOptions:
        """Set ``FORCE``."""
        return replace(self, force=True)

    def with_justid(self) -> StreamClaimOptions:
        """Set ``JUSTID``; the reply then holds only ids."""
        return replace(self, justid=True)

    def redis_args(self) -> list[bytes]:
        """The command arguments these options stand for."""
        out: list[bytes] = []
        if self.idle_ms is not None:
            out += [b"IDLE", _num(self.idle_ms)]
        if self.time_ms is not None:
            out += [b"TIME", _num(self.time_ms)]
        if self.retry_count is not None:
            out += [b"RETRYCOUNT", _num(self.retry_count)]
        if self.force:
            out.append(b"FORCE")
        if self.justid:
            out.append(b"JUSTID")
        return out


@dataclass(frozen=True)
class StreamReadOptions:
    """Options for XREAD; setting a group turns the command into XREADGROUP."""

    block_ms: int | None = None
    max_count: int | None = None
    no_ack: bool = False
    group_args: tuple[tuple[bytes, ...], tuple[bytes, ...]] | None = None

    def read_only(self) -> bool:
        """Whether the read takes no part in a consumer group."""
        return self.group_args is None

    def noack(self) -> StreamReadOptions:
        """Do not add read messages to the pending entries list."""
        return replace(self, no_ack=True)

    def block(self, ms: int) -> StreamReadOptions:
        """Set the block time in milliseconds."""
        return replace(self, block_ms=_usize("ms", ms))

    def count(self, n: int) -> StreamReadOptions:
        """Set the most entries to return per stream."""
        return replace(self, max_count=_usize("n", n))

    def group(self, group_name: Any, consumer_name: Any) -> StreamReadOptions:
        """Read as ``consumer_name`` of the consumer group ``group_name``."""
        return replace(
            self,
            group_args=(
                tuple(to_redis_args(group_name)),
                tuple(to_redis_args(consumer_name)),
            ),
        )

    def redis_args(self) -> list[bytes]:
        """The command arguments these options stand for."""
        out: list[bytes] = []
        if self.block_ms is not None:
            out += [b"BLOCK", _num(self.block_ms)]
        if self.max_count is not None:
            out += [b"COUNT", _num(self.max_count)]
        if self.group_args is not None:
            if self.no_ack:
                out.append(b"NOACK")
            out.append(b"GROUP")
            group_name, consumer_name = self.group_args
            out.extend(group_name)
            out.extend(consumer_name)
        return out