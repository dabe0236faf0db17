"""
Tests for Generation UI
=======================
Tests for the progress display in numberkit/ui.py.
"""

import io

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rich.console import Console

from numberkit.categorizer import categorize
from numberkit.config import ScoringConfig
from numberkit.generator import PHASE_RANDOM, PHASE_STRUCTURED, GenerationProgress
from numberkit.parallel import BackgroundGenerator
from numberkit.ui import GenerationUI, SimpleUI, format_eta, get_ui


@pytest.fixture
def terminal():
    return Console(file=io.StringIO(), force_terminal=True, width=120)


class TestGetUI:
    """Tests for picking the display."""

    def test_quiet_uses_simple(self, terminal):
        assert isinstance(get_ui(5, 4, "Gold", quiet=True, console=terminal), SimpleUI)

    def test_non_terminal_uses_simple(self):
        console = Console(file=io.StringIO(), force_terminal=False)
        assert isinstance(get_ui(5, 4, "Gold", console=console), SimpleUI)

    def test_terminal_uses_rich(self, terminal):
        assert isinstance(get_ui(5, 4, "Gold", console=terminal), GenerationUI)


class TestGenerationUI:
    """Tests for the live display."""

    def test_updates(self, terminal):
        with GenerationUI(target=3, length=4, tier="Premium", console=terminal) as ui:
            ui.add_match(categorize("1111"))
            ui.update(GenerationProgress(PHASE_STRUCTURED, 100, 1, 3, 0))
            ui.update(GenerationProgress(PHASE_RANDOM, 600, 2, 3, 120, fraction=0.8, eta_seconds=12.0))
        assert ui.found == 2
        assert ui.examined == 600

    def test_driven_by_background_job(self, terminal):
        with BackgroundGenerator(ScoringConfig(), workers=1, max_attempts=500) as runner:
            with GenerationUI(target=4, length=4, tier="Premium", console=terminal) as ui:
                job = runner.submit(4, "Premium", 4, on_match=ui.add_match, on_progress=ui.update)
                results = job.result(timeout=60)
        assert len(results) == 4
        assert ui.found >= 4


class TestSimpleUI:
    """Tests for the silent display."""

    def test_counts(self):
        ui = SimpleUI(target=2)
        with ui:
            ui.add_match(categorize("2222"))
            ui.update(GenerationProgress(PHASE_STRUCTURED, 10, 1, 2, 0))
        assert ui.found == 1
        assert ui.examined == 10


class TestFormatEta:
    """Tests for ETA text."""

    def test_unknown(self):
        assert format_eta(None) == "-"

    def test_seconds_and_minutes(self):
        assert format_eta(42.7) == "42s"
        assert format_eta(125) == "2m 5s"
