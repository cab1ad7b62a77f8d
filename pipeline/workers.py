"""pipeline.workers

Fixed-size pool of worker threads draining a bounded queue of comparison
pairs.

Rule
----
Every pair produces exactly one outcome, and :func:`run_worker_pool` does not
return before every worker has exited. Errors raised while comparing a pair
become a FAILED outcome for that pair; they never stop a worker.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional, Sequence

from .models import ComparisonOutcome, ComparisonPair

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5

CompareFn = Callable[[ComparisonPair], ComparisonOutcome]

# end-of-work marker, one per worker
_DONE = object()


def _worker(
    pairs: "queue.Queue[object]",
    results: "queue.Queue[ComparisonOutcome]",
    compare_fn: CompareFn,
    cancel: threading.Event,
) -> None:
    while True:
        item = pairs.get()
        if item is _DONE:
            return

        if cancel.is_set():
            results.put(ComparisonOutcome.skipped(item.source, "cancelled"))
            continue

        try:
            outcome = compare_fn(item)
        except Exception as e:
            logger.exception("unexpected error while comparing %s", item.label)
            outcome = ComparisonOutcome.failed(item.source, f"unexpected error: {e!r}")
        results.put(outcome)


def _join_all(threads: Sequence[threading.Thread], cancel: threading.Event) -> None:
    for t in threads:
        while t.is_alive():
            try:
                t.join()
            except KeyboardInterrupt:
                logger.warning("interrupted, waiting for in-flight comparisons to finish")
                cancel.set()


def run_worker_pool(
    pairs: Sequence[ComparisonPair],
    compare_fn: CompareFn,
    *,
    concurrency: int = DEFAULT_CONCURRENCY,
    cancel: Optional[threading.Event] = None,
) -> List[ComparisonOutcome]:
    """Process all *pairs* with at most *concurrency* comparisons in flight.

    Outcomes are returned in completion order.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    cancel = cancel or threading.Event()
    work: "queue.Queue[object]" = queue.Queue(maxsize=concurrency)
    results: "queue.Queue[ComparisonOutcome]" = queue.Queue()

    logger.info("launching %d comparison workers", concurrency)
    threads = [
        threading.Thread(
            target=_worker,
            args=(work, results, compare_fn, cancel),
            name=f"compare-{i + 1}",
            daemon=True,
        )
        for i in range(concurrency)
    ]
    for t in threads:
        t.start()

    pending = list(pairs)
    fed = 0
    stopped = 0
    while True:
        try:
            while fed < len(pending):
                pair = pending[fed]
                if cancel.is_set():
                    results.put(ComparisonOutcome.skipped(pair.source, "cancelled"))
                else:
                    work.put(pair)
                fed += 1
            while stopped < len(threads):
                work.put(_DONE)
                stopped += 1
            _join_all(threads, cancel)
            break
        except KeyboardInterrupt:
            logger.warning("interrupted, waiting for in-flight comparisons to finish")
            cancel.set()

    outcomes: List[ComparisonOutcome] = []
    while not results.empty():
        outcomes.append(results.get_nowait())
    return outcomes
