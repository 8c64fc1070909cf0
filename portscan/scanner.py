from __future__ import annotations

import errno
import logging
import queue
import socket
import threading
import time
from typing import Callable, Dict, List, Optional

from .config import DEFAULT_MAX_WORKERS
from .models import FailureKind, PortRange, ScanResult

log = logging.getLogger(__name__)

Probe = Callable[[str, int, Optional[float]], ScanResult]

_UNREACHABLE_ERRNOS = {errno.EHOSTUNREACH, errno.ENETUNREACH, errno.EHOSTDOWN, errno.ENETDOWN}

# Pushed once per worker on close()
_STOP = object()


def classify_failure(exc: BaseException) -> FailureKind:
    # gaierror and timeout are OSError subclasses, check them first
    if isinstance(exc, (socket.gaierror, UnicodeError)):
        return FailureKind.RESOLUTION
    if isinstance(exc, (socket.timeout, TimeoutError)):
        return FailureKind.TIMEOUT
    if isinstance(exc, ConnectionRefusedError):
        return FailureKind.REFUSED
    if isinstance(exc, OSError) and exc.errno in _UNREACHABLE_ERRNOS:
        return FailureKind.UNREACHABLE
    return FailureKind.OTHER


def probe_port(host: str, port: int, timeout_s: Optional[float] = None) -> ScanResult:
    """
    Connect to host:port over TCP and close straight away without sending data.
    timeout_s=None keeps the socket blocking, so the OS connect timeout applies.
    """
    start = time.perf_counter()
    try:
        sock = socket.create_connection((host, port), timeout=timeout_s)
    except (OSError, UnicodeError) as e:
        # UnicodeError comes from IDNA encoding of malformed hostnames
        return ScanResult(
            port=port,
            success=False,
            kind=classify_failure(e),
            error=e,
            elapsed_s=round(time.perf_counter() - start, 4),
        )
    sock.close()
    return ScanResult(port=port, success=True, elapsed_s=round(time.perf_counter() - start, 4))


class ScanEngine:
    """
    Fixed-size pool of worker threads fed through a job queue.

    The pool is started once and reused for every range scanned with the
    engine; close() stops and joins the workers. At most max_workers connect
    attempts are in flight at any time, whatever the size of the range.
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        timeout_s: Optional[float] = None,
        probe: Optional[Probe] = None,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.max_workers = max_workers
        self.timeout_s = timeout_s
        self._probe = probe or probe_port

        self._jobs: "queue.Queue[object]" = queue.Queue()
        self._results: "queue.Queue[ScanResult]" = queue.Queue()
        self._workers: List[threading.Thread] = []
        self._scan_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> "ScanEngine":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def worker_count(self) -> int:
        return sum(1 for t in self._workers if t.is_alive())

    def start(self) -> None:
        with self._state_lock:
            if self._closed:
                raise RuntimeError("scan engine is closed")
            if self._workers:
                return
            for i in range(self.max_workers):
                t = threading.Thread(target=self._worker, name=f"portscan-worker-{i}", daemon=True)
                t.start()
                self._workers.append(t)
        log.debug("started %d scan workers", self.max_workers)

    def close(self) -> None:
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
            workers, self._workers = self._workers, []

        for _ in workers:
            self._jobs.put(_STOP)
        for t in workers:
            t.join()
        log.debug("stopped %d scan workers", len(workers))

    def _worker(self) -> None:
        while True:
            job = self._jobs.get()
            if job is _STOP:
                return
            host, port = job
            try:
                result = self._probe(host, port, self.timeout_s)
            except Exception as e:  # noqa: BLE001
                # the collector waits for one result per port, never drop one
                log.exception("probe of %s:%d failed unexpectedly", host, port)
                result = ScanResult(port=port, success=False, kind=FailureKind.OTHER, error=e)
            self._results.put(result)

    def scan_results(self, host: str, port_range: PortRange) -> List[ScanResult]:
        """
        Scan every port of [start, end) on host and return one result per port,
        in completion order.
        """
        self.start()
        if port_range.is_empty:
            log.warning("range %s on %s is empty, nothing to scan", port_range, host)
            return []

        expected = len(port_range)
        started = time.perf_counter()

        with self._scan_lock:
            log.info("scanning %s ports %s (%d ports, %d workers)", host, port_range, expected, self.max_workers)

            # Queue every job before collecting; the queue is unbounded so this never blocks
            for port in port_range.ports():
                self._jobs.put((host, port))

            results: List[ScanResult] = []
            for _ in range(expected):
                r = self._results.get()
                if not r.success:
                    log.debug("%s:%d closed (%s: %s)", host, r.port, r.kind.value if r.kind else "-", r.error)
                results.append(r)

        log.debug("range %s on %s done in %.2fs", port_range, host, time.perf_counter() - started)
        return results

    def scan(self, host: str, port_range: PortRange) -> Dict[int, bool]:
        return {r.port: r.success for r in self.scan_results(host, port_range)}


def scan_ports(
    host: str,
    port_range: PortRange,
    max_workers: int = DEFAULT_MAX_WORKERS,
    timeout_s: Optional[float] = None,
) -> Dict[int, bool]:
    """One-shot scan of a single range with a pool that is torn down afterwards."""
    with ScanEngine(max_workers=max_workers, timeout_s=timeout_s) as engine:
        return engine.scan(host, port_range)
