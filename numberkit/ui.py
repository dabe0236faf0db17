#!/usr/bin/env python3
"""
Generation UI
=============
Rich-based progress display for long generation runs.

Shows a spinner, matches found against the target, the current phase and
how many candidates have been examined. Updates arrive from the worker
thread through the Generator's on_progress/on_match callbacks.

Usage:
    from numberkit.ui import get_ui

    with get_ui(target=20, length=8, tier="Premium") as ui:
        job = runner.submit(8, "Premium", 20, on_match=ui.add_match, on_progress=ui.update)
        results = job.result()
"""

import threading
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from numberkit.categorizer import Assessment
from numberkit.generator import PHASE_STRUCTURED, GenerationProgress

PHASE_NAMES = {
    PHASE_STRUCTURED: "templates",
}


def format_eta(seconds: Optional[float]) -> str:
    if seconds is None:
        return "-"
    mins, secs = divmod(int(seconds), 60)
    if mins > 0:
        return f"{mins}m {secs}s"
    return f"{secs}s"


class GenerationUI:
    """
    Live progress bar on stderr.

    Example:
        with GenerationUI(target=10, length=6, tier="Gold") as ui:
            ui.update(progress)
            ui.add_match(assessment)
    """

    def __init__(self, target: int, length: int, tier: str, console: Optional[Console] = None):
        self.target = target
        self.length = length
        self.tier = tier
        self.console = console or Console(stderr=True)
        self.found = 0
        self.examined = 0
        self._lock = threading.Lock()
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            TextColumn("{task.completed}/{task.total} found"),
            TextColumn("[dim]{task.fields[phase]}, {task.fields[examined]:,} examined"),
            TimeElapsedColumn(),
            TextColumn("[dim]ETA {task.fields[eta]}"),
            console=self.console,
            transient=True,
        )
        self._task = None

    def __enter__(self):
        self._progress.__enter__()
        self._task = self._progress.add_task(
            f"{self.length}-digit {self.tier}",
            total=self.target,
            phase=PHASE_NAMES[PHASE_STRUCTURED],
            examined=0,
            eta="-",
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._progress.__exit__(exc_type, exc_val, exc_tb)
        return False

    def update(self, progress: GenerationProgress):
        with self._lock:
            self.examined = progress.examined
            self.found = max(self.found, progress.found)
            found = self.found
        self._progress.update(
            self._task,
            completed=min(found, self.target),
            phase=PHASE_NAMES.get(progress.phase, f"sampling ({progress.random_attempts:,} draws)"),
            examined=progress.examined,
            eta=format_eta(progress.eta_seconds),
        )

    def add_match(self, item: Assessment):
        with self._lock:
            self.found += 1
            found = self.found
        self._progress.update(self._task, completed=min(found, self.target))


class SimpleUI:
    """Silent stand-in for quiet mode, JSON output and non-TTY streams."""

    def __init__(self, **kwargs):
        self.target = kwargs.get('target', 0)
        self.found = 0
        self.examined = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def update(self, progress: GenerationProgress):
        self.examined = progress.examined

    def add_match(self, item: Assessment):
        self.found += 1


def get_ui(target: int, length: int, tier: str, quiet: bool = False,
           console: Optional[Console] = None):
    """Get a live UI when stderr is a terminal, otherwise SimpleUI."""
    console = console or Console(stderr=True)
    if quiet or not console.is_terminal:
        return SimpleUI(target=target)
    return GenerationUI(target=target, length=length, tier=tier, console=console)


__all__ = [
    'GenerationUI',
    'SimpleUI',
    'get_ui',
    'format_eta',
]
