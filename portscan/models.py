from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


@dataclass(frozen=True)
class PortRange:
    """Half-open interval [start, end) of TCP ports."""

    start: int
    end: int

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def ports(self) -> Iterator[int]:
        return iter(range(self.start, self.end))

    def __len__(self) -> int:
        return max(0, self.end - self.start)

    def __str__(self) -> str:
        return f"[{self.start},{self.end})"


class FailureKind(str, Enum):
    REFUSED = "refused"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    RESOLUTION = "resolution"
    OTHER = "other"


@dataclass(frozen=True)
class ScanResult:
    port: int
    success: bool
    kind: Optional[FailureKind] = None
    error: Optional[BaseException] = None
    elapsed_s: float = 0.0
