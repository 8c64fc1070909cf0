from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Optional

from .config import get_settings
from .output import print_results, summarize
from .ports import RangeSpecError, parse_ranges
from .scanner import ScanEngine

log = logging.getLogger(__name__)

USAGE = "portscan -c <host> -range port|start-end[,port|start-end ...] [-debug]"


def setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="portscan", usage=USAGE, description="TCP connect port scanner")
    p.add_argument("-c", "--host", default="", help="host to scan (hostname or IP)")
    p.add_argument("-r", "-range", "--range", dest="range", default="", help="ports to scan: 80 or 1000-2000, comma-separated")
    p.add_argument("-debug", "--debug", action="store_true", help="include results on all ports")
    p.add_argument("-w", "--workers", type=int, default=None, help="worker pool size (default: PORTSCAN_MAX_WORKERS or 100)")
    p.add_argument("-t", "--timeout", type=float, default=None, help="connect timeout seconds (default: OS timeout)")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.host or not args.range:
        parser.print_usage()
        return 1

    settings = get_settings()
    setup_logging(logging.DEBUG if args.debug else settings.log_level_value)

    try:
        ranges = parse_ranges(args.range)
    except RangeSpecError as e:
        raise SystemExit(f"invalid port range specification: {e}") from e

    workers = args.workers if args.workers is not None else settings.max_workers
    if workers < 1:
        raise SystemExit("--workers must be >= 1")
    timeout_s = args.timeout if args.timeout is not None else settings.connect_timeout
    if timeout_s is not None and timeout_s <= 0:
        raise SystemExit("--timeout must be > 0")

    all_results: List[Dict[int, bool]] = []
    with ScanEngine(max_workers=workers, timeout_s=timeout_s) as engine:
        for pr in ranges:
            results = engine.scan(args.host, pr)
            print_results(results, debug=args.debug)
            all_results.append(results)

    scanned, open_count = summarize(all_results)
    log.info("found %d open ports out of %d scanned on %s", open_count, scanned, args.host)
    return 0
