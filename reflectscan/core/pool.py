"""Fixed-size worker pool draining a bounded queue of input URLs."""

import queue
import threading
from typing import Iterable, List

from reflectscan.core.engine import Engine
from reflectscan.core.models import DEFAULT_WORKERS, ScanSummary

_DONE = object()


class ScanWorkerPool:
    """
    Fan-out/fan-in over ``Engine.process``.

    A single producer (the caller of run()) fills a queue whose capacity
    equals the worker count, so reading input blocks while every worker
    is busy. Each worker finishes one URL completely before taking the
    next. run() returns once every worker has joined.

    Usage:
        pool = ScanWorkerPool(engine, workers=10)
        summary = pool.run(urls)
    """

    def __init__(self, engine: Engine, workers: int = DEFAULT_WORKERS, logger=None):
        self.engine = engine
        self.workers = max(1, workers)
        self.logger = logger if logger is not None else engine.logger

    def run(self, urls: Iterable[str]) -> ScanSummary:
        jobs: "queue.Queue" = queue.Queue(maxsize=self.workers)
        # one slot per worker: (urls processed, reflected findings)
        counts = [[0, 0] for _ in range(self.workers)]

        threads = [
            threading.Thread(target=self._work, args=(jobs, counts[i]),
                             name=f"reflectscan-worker-{i}")
            for i in range(self.workers)
        ]
        for t in threads:
            t.start()

        summary = ScanSummary()
        try:
            for url in urls:
                jobs.put(url)
        except (OSError, UnicodeDecodeError) as exc:
            summary.input_error = f"reading input: {exc}"
        finally:
            for _ in threads:
                jobs.put(_DONE)
            for t in threads:
                t.join()

        summary.processed = sum(processed for processed, _ in counts)
        summary.reflected = sum(reflected for _, reflected in counts)
        if summary.input_error and self.logger:
            self.logger.error(summary.input_error)
        return summary

    def _work(self, jobs: "queue.Queue", slot: List[int]):
        while True:
            url = jobs.get()
            if url is _DONE:
                return
            try:
                findings = self.engine.process(url)
                slot[1] += sum(1 for f in findings if f.reflected)
            except Exception as exc:
                if self.logger:
                    self.logger.error(f"Unexpected error while scanning {url}: {exc!r}")
            slot[0] += 1
