"""
Tests for Tier Distribution
===========================
Tests for tier_distribution() in numberkit/calibration.py.
"""

import random

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from numberkit.calibration import tier_distribution
from numberkit.config import ScoringConfig
from numberkit.scoring import TIER_NAMES


@pytest.fixture(scope="module")
def four_digit():
    return tier_distribution(4, ScoringConfig())


class TestTierDistribution:
    """Tests for exhaustive and sampled distributions."""

    def test_exhaustive_four_digits(self, four_digit):
        assert four_digit.exhaustive
        assert four_digit.examined == 10000
        assert sum(four_digit.counts.values()) == 10000
        assert set(four_digit.counts) == set(TIER_NAMES)

    def test_premium_is_rare(self, four_digit):
        assert four_digit.counts["Premium"] >= 10
        assert four_digit.share("Premium") < 0.01
        assert four_digit.maximum == 100
        assert four_digit.minimum == 0

    def test_statistics_in_range(self, four_digit):
        assert 0 <= four_digit.mean <= 100
        assert 0 <= four_digit.median <= 100
        assert four_digit.stdev > 0

    def test_share_sums_to_one(self, four_digit):
        assert sum(four_digit.share(t) for t in TIER_NAMES) == pytest.approx(1.0)

    def test_sampled(self):
        dist = tier_distribution(8, ScoringConfig(), sample_size=300, rng=random.Random(11))
        assert not dist.exhaustive
        assert dist.examined == 300
        assert sum(dist.counts.values()) == 300

    def test_sampled_repeatable(self):
        a = tier_distribution(7, ScoringConfig(), sample_size=100, rng=random.Random(5))
        b = tier_distribution(7, ScoringConfig(), sample_size=100, rng=random.Random(5))
        assert a.to_dict() == b.to_dict()

    def test_force_sampling_short_length(self):
        dist = tier_distribution(4, ScoringConfig(), sample_size=50, exhaustive=False, rng=random.Random(1))
        assert dist.examined == 50

    def test_empty_sample(self):
        dist = tier_distribution(6, ScoringConfig(), sample_size=0, exhaustive=False)
        assert dist.examined == 0
        assert dist.share("Gold") == 0.0

    @pytest.mark.parametrize("length", [3, 9])
    def test_invalid_length(self, length):
        with pytest.raises(ValueError):
            tier_distribution(length)

    def test_to_dict(self, four_digit):
        data = four_digit.to_dict()
        assert data["length"] == 4
        assert data["max"] == 100
