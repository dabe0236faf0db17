#!/usr/bin/env python3
"""
Background Generation
=====================
Runs generation off the caller's thread so an interactive front end can
stay responsive and cancel a long random-sampling phase.

Usage:
    from numberkit.parallel import BackgroundGenerator

    with BackgroundGenerator() as runner:
        job = runner.submit(8, "Premium", 20)
        ...
        job.pause()             # worker blocks before its next candidate
        job.resume()
        job.cancel()            # partial results are discarded
        results = job.result()  # raises after cancel
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union

from numberkit.categorizer import Assessment
from numberkit.config import ScoringConfig
from numberkit.generator import GenerationControl, GenerationProgress, Generator
from numberkit.scoring import Tier
from numberkit.settings import get_setting

logger = logging.getLogger(__name__)


@dataclass
class GenerationJob:
    """Handle for a generation running in the background."""
    length: int
    tier: str
    count: int
    future: Future
    control: GenerationControl = field(default_factory=GenerationControl)
    _progress: Optional[GenerationProgress] = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def cancel(self):
        """
        Stop the search.

        result() then raises GenerationCancelled, or CancelledError if the
        job never got a worker.
        """
        self.control.cancel()
        self.future.cancel()

    def pause(self):
        self.control.pause()

    def resume(self):
        self.control.resume()

    @property
    def paused(self) -> bool:
        return self.control.paused

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> List[Assessment]:
        return self.future.result(timeout=timeout)

    @property
    def progress(self) -> Optional[GenerationProgress]:
        with self._lock:
            return self._progress

    def _record_progress(self, progress: GenerationProgress):
        with self._lock:
            self._progress = progress


class BackgroundGenerator:
    """
    Thread pool wrapper around Generator.

    Each job gets its own GenerationControl. The configuration is captured
    when the job is submitted, so later config changes by the caller do not
    affect running jobs.
    """

    def __init__(self,
                 config: Optional[ScoringConfig] = None,
                 workers: Optional[int] = None,
                 max_attempts: Optional[int] = None):
        if workers is None:
            workers = get_setting("background.workers", 1)
        if int(workers) < 1:
            raise ValueError("background.workers must be at least 1")
        self.config = config
        self.max_attempts = max_attempts
        self._executor = ThreadPoolExecutor(max_workers=int(workers), thread_name_prefix="numberkit-gen")
        self._jobs: List[GenerationJob] = []

    def submit(self,
               length: int,
               tier: Union[Tier, str],
               count: int,
               config: Optional[ScoringConfig] = None,
               on_match: Optional[Callable[[Assessment], None]] = None,
               on_progress: Optional[Callable[[GenerationProgress], None]] = None) -> GenerationJob:
        generator = Generator(config or self.config, max_attempts=self.max_attempts)
        control = GenerationControl()
        label = Tier.from_name(tier).label
        job = GenerationJob(length=length, tier=label, count=count, future=Future(), control=control)

        def report(progress: GenerationProgress):
            job._record_progress(progress)
            if on_progress:
                on_progress(progress)

        def run() -> List[Assessment]:
            logger.debug(f"Background generation started: {length}-digit {label} x{count}")
            return generator.generate(
                length, label, count,
                control=control,
                on_progress=report,
                on_match=on_match,
            )

        job.future = self._executor.submit(run)
        self._jobs.append(job)
        return job

    def shutdown(self, cancel_running: bool = True):
        """Stop the pool, cancelling outstanding jobs first if asked."""
        if cancel_running:
            for job in self._jobs:
                if not job.done():
                    job.cancel()
        self._executor.shutdown(wait=True, cancel_futures=cancel_running)

    def __enter__(self) -> "BackgroundGenerator":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
