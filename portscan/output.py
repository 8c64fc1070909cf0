from __future__ import annotations

from typing import Dict, Iterable, Tuple


def format_row(port: int, success: bool) -> str:
    return f"{port}: {'true' if success else 'false'}"


def print_results(results: Dict[int, bool], debug: bool) -> None:
    """Print one line per port, open ports only unless debug is set."""
    for port, success in sorted(results.items()):
        if success or debug:
            print(format_row(port, success))


def summarize(results: Iterable[Dict[int, bool]]) -> Tuple[int, int]:
    """Return (scanned, open) totals across several result sets."""
    scanned = 0
    open_count = 0
    for rs in results:
        scanned += len(rs)
        open_count += sum(1 for ok in rs.values() if ok)
    return scanned, open_count
