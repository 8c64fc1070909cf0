from __future__ import annotations

from typing import List

from .models import PortRange

MAX_PORT = 65535


class RangeSpecError(ValueError):
    """Base class for port range specification errors."""


class ParseError(RangeSpecError):
    def __init__(self, token: str, piece: str):
        self.token = token
        self.piece = piece
        super().__init__(f"invalid port {piece!r} in {token!r} (expected 0-{MAX_PORT})")


class InvalidSpecification(RangeSpecError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"invalid port specification {token!r}")


def _parse_port(token: str, piece: str) -> int:
    # str.isdigit() also accepts non-ASCII digits
    if not piece or not (piece.isascii() and piece.isdigit()):
        raise ParseError(token, piece)
    n = int(piece)
    if n > MAX_PORT:
        raise ParseError(token, piece)
    return n


def parse_range(token: str) -> PortRange:
    """
    Parses one token into a half-open range:
    - "80"        -> [80,81)
    - "1000-2000" -> [1000,2000)   (taken verbatim, no ordering check)
    """
    token = token.strip()
    if not token:
        raise InvalidSpecification(token)

    nums = [_parse_port(token, piece) for piece in token.split("-", 1)]
    if len(nums) == 1:
        return PortRange(nums[0], nums[0] + 1)
    if len(nums) == 2:
        return PortRange(nums[0], nums[1])
    raise InvalidSpecification(token)


def parse_ranges(spec: str) -> List[PortRange]:
    """
    Parses a comma-separated range spec, e.g. "22,80,8000-8100".
    Returns one PortRange per token in input order; any bad token fails the whole spec.
    """
    return [parse_range(part) for part in spec.strip().split(",")]
