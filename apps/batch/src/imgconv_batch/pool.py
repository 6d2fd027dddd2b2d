"""
Fixed-size worker pool for per-file jobs.

Layout:
    feeder thread -> jobs queue (bounded) -> N worker threads
    N worker threads -> results queue -> collector (the caller)
    closer thread: joins the workers, then marks the results queue done
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from queue import Queue
from typing import Callable, Iterable, Iterator

from imgconv_shared.jobs import ConversionJob, ConversionOutcome

logger = logging.getLogger(__name__)

Handler = Callable[[Path], ConversionOutcome]
JobResult = tuple[ConversionJob, ConversionOutcome]


class WorkerPool:
    """
    Runs a handler over many paths with a fixed number of threads.

    Every path becomes one ConversionJob handled by exactly one worker.
    Results come back in completion order. A handler that raises only
    fails its own job. If iterating the paths raises, the jobs already
    queued still finish and the error is re-raised to the collector.
    """

    def __init__(self, worker_count: int, handler: Handler):
        if worker_count < 1:
            raise ValueError(f"worker_count must be at least 1, got {worker_count}")
        self._worker_count = worker_count
        self._handler = handler

    @property
    def worker_count(self) -> int:
        return self._worker_count

    def iter_results(self, paths: Iterable[Path]) -> Iterator[JobResult]:
        """Yield (job, outcome) pairs as workers finish them."""
        # Bounded so the feeder blocks while every worker is busy
        jobs: Queue[ConversionJob | None] = Queue(maxsize=self._worker_count)
        results: Queue[JobResult | None] = Queue()
        feed_errors: list[Exception] = []

        workers = [
            threading.Thread(
                target=self._work,
                args=(jobs, results),
                name=f"imgconv-worker-{i}",
                daemon=True,
            )
            for i in range(self._worker_count)
        ]
        for worker in workers:
            worker.start()

        feeder = threading.Thread(
            target=self._feed,
            args=(paths, jobs, feed_errors),
            name="imgconv-feeder",
            daemon=True,
        )
        feeder.start()

        closer = threading.Thread(
            target=self._close,
            args=(workers, results),
            name="imgconv-closer",
            daemon=True,
        )
        closer.start()

        while True:
            item = results.get()
            if item is None:
                break
            yield item

        if feed_errors:
            raise feed_errors[0]

    def iter_outcomes(self, paths: Iterable[Path]) -> Iterator[ConversionOutcome]:
        for _, outcome in self.iter_results(paths):
            yield outcome

    def run(self, paths: Iterable[Path]) -> list[ConversionOutcome]:
        """Process every path and return all outcomes (completion order)."""
        return list(self.iter_outcomes(paths))

    def _feed(
        self,
        paths: Iterable[Path],
        jobs: Queue[ConversionJob | None],
        errors: list[Exception],
    ) -> None:
        count = 0
        try:
            for index, path in enumerate(paths):
                jobs.put(ConversionJob(source_path=Path(path), index=index))
                count += 1
        except Exception as e:
            logger.error("Job feeder stopped after %d job(s): %s: %s", count, type(e).__name__, e)
            errors.append(e)
        finally:
            # One stop marker per worker: no more work
            for _ in range(self._worker_count):
                jobs.put(None)
        logger.debug("Queued %d job(s)", count)

    def _work(self, jobs: Queue[ConversionJob | None], results: Queue[JobResult | None]) -> None:
        while True:
            job = jobs.get()
            if job is None:
                return
            results.put((job, self._handle(job)))

    def _handle(self, job: ConversionJob) -> ConversionOutcome:
        try:
            return self._handler(job.source_path)
        except Exception as e:
            error_msg = f"{type(e).__name__}: {e}"
            logger.error("Job %d (%s) failed: %s", job.index, job.source_path, error_msg)
            logger.debug("Traceback for job %d", job.index, exc_info=True)
            return ConversionOutcome.failed(job.source_path, error_msg)

    @staticmethod
    def _close(workers: list[threading.Thread], results: Queue[JobResult | None]) -> None:
        for worker in workers:
            worker.join()
        results.put(None)
