"""Bounded worker pool that hands scan units to threads until told to stop."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

from gitsweep.findings.models import Leak

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Deadline:
    """Wall-clock budget for a scan; ``None`` means unbounded."""

    def __init__(self, timeout: Optional[float]) -> None:
        self._expires = time.monotonic() + timeout if timeout else None

    def exceeded(self) -> bool:
        return self._expires is not None and time.monotonic() >= self._expires


def run_pool(
    units: Iterable[T],
    worker: Callable[[T], List[Leak]],
    *,
    threads: int = 1,
    deadline: Optional[Deadline] = None,
    should_stop: Optional[Callable[[int], bool]] = None,
) -> List[Leak]:
    """Run *worker* over *units* on *threads* threads and gather the leaks.

    Before each unit is handed out, *should_stop* (given the number already
    dispatched) and *deadline* are consulted; either one ends dispatching.
    Units already running are allowed to finish. Leak batches are gathered in
    dispatch order by the calling thread only.
    """
    futures: List[Future[List[Leak]]] = []
    with ThreadPoolExecutor(max_workers=max(threads, 1), thread_name_prefix="gitsweep") as pool:
        for unit in units:
            if should_stop is not None and should_stop(len(futures)):
                break
            if deadline is not None and deadline.exceeded():
                logger.warning("Timeout exceeded, stopping after %d units", len(futures))
                break
            futures.append(pool.submit(worker, unit))

    leaks: List[Leak] = []
    for future in futures:
        leaks.extend(future.result())
    return leaks
