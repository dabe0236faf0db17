"""
Tests for Number Scoring
========================
Tests for the feature functions, score() and the tier mapping in
numberkit/scoring.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from numberkit.config import ScoringConfig
from numberkit.scoring import (
    Tier,
    TIER_NAMES,
    alternation_score,
    breakdown,
    classify,
    cultural_adjustment,
    digit_runs,
    longest_monotonic_run,
    minimal_period,
    pattern_score,
    periodic_score,
    repetition_score,
    rhythm_score,
    round_score,
    score,
    sequence_score,
    unique_digit_score,
)


@pytest.fixture
def cfg():
    """Default weights with the 7/8 lucky and 4 unlucky tokens."""
    return ScoringConfig()


class TestHelpers:
    """Tests for runs, periods and monotonic runs."""

    def test_digit_runs(self):
        assert digit_runs("1112") == [3, 1]
        assert digit_runs("1221") == [1, 2, 1]
        assert digit_runs("5555") == [4]

    def test_minimal_period(self):
        assert minimal_period("1111") == 1
        assert minimal_period("1212") == 2
        assert minimal_period("123123") == 3
        assert minimal_period("1234") == 4
        assert minimal_period("12121") == 5

    def test_longest_monotonic_run(self):
        assert longest_monotonic_run("1234") == 4
        assert longest_monotonic_run("98761") == 4
        assert longest_monotonic_run("1357") == 1
        # direction change restarts the run
        assert longest_monotonic_run("12321") == 3


class TestRepetition:
    """Tests for the repetition feature."""

    def test_all_repeat(self):
        assert repetition_score("1111") == pytest.approx(4 ** 2.5)
        assert repetition_score("1111") == pytest.approx(32.0)

    def test_three_plus_one(self):
        assert repetition_score("1112") == pytest.approx(3 ** 2.5)

    def test_all_repeat_beats_partial(self):
        assert repetition_score("1112") < repetition_score("1111")

    def test_single_digits_ignored(self):
        assert repetition_score("1234") == 0

    def test_multiple_runs_add_up(self):
        assert repetition_score("1122") == pytest.approx(2 * 2 ** 2.5)


class TestSequence:
    """Tests for the sequence feature."""

    def test_ascending_four(self):
        # two windows plus 4 * 4.7 for the full run
        assert sequence_score("1234") == pytest.approx(30 + 18.8)

    def test_descending_four(self):
        assert sequence_score("4321") == pytest.approx(48.8)

    def test_short_run_no_bonus(self):
        assert sequence_score("1235") == pytest.approx(15)

    def test_no_sequence(self):
        assert sequence_score("1357") == 0

    def test_eight_digit_run(self):
        # six windows plus 8 * 4.7
        assert sequence_score("01234567") == pytest.approx(90 + 37.6)


class TestPattern:
    """Tests for palindrome, pair and motif bonuses."""

    def test_palindrome(self):
        assert pattern_score("1221") == 25

    def test_non_palindrome_same_profile(self):
        assert pattern_score("1222") == 0

    def test_all_same(self):
        # palindrome + paired digits + AABB motif
        assert pattern_score("1111") == 59

    def test_abab(self):
        assert pattern_score("1212") == 20

    def test_aabb(self):
        assert pattern_score("1122") == 34

    def test_motif_anywhere(self):
        assert pattern_score("901122") == 20

    def test_odd_length_only_palindrome(self):
        assert pattern_score("12121") == 25
        assert pattern_score("11223") == 0


class TestPeriodicAndAlternation:
    """Tests for periodic, alternation, rhythm and unique-digit features."""

    def test_periodic(self):
        assert periodic_score("1111") == pytest.approx(36)
        assert periodic_score("123123") == pytest.approx(12)
        assert periodic_score("1234") == 0

    def test_alternation(self):
        assert alternation_score("1212") == 15
        assert alternation_score("1111") == 0
        assert alternation_score("123123") == 0

    def test_rhythm(self):
        assert rhythm_score("1111") == pytest.approx(24)
        assert rhythm_score("1122") == pytest.approx(12)
        assert rhythm_score("1234") == pytest.approx(6)

    def test_unique_digit(self):
        assert unique_digit_score("1111") == 15
        assert unique_digit_score("1234") == 0
        assert unique_digit_score("1212") == 10


class TestCultural:
    """Tests for the lucky/unlucky token adjustment."""

    def test_lucky_and_unlucky(self, cfg):
        assert cultural_adjustment("7841", cfg) == pytest.approx(0)
        assert cultural_adjustment("7800", cfg) == pytest.approx(10)
        assert cultural_adjustment("4000", cfg) == pytest.approx(-10)

    def test_token_counted_once(self, cfg):
        assert cultural_adjustment("7777", cfg) == pytest.approx(5)

    def test_multi_digit_tokens(self):
        cfg = ScoringConfig(lucky_tokens={"13"}, unlucky_tokens={"666"})
        assert cultural_adjustment("1366", cfg) == pytest.approx(5)
        assert cultural_adjustment("6661", cfg) == pytest.approx(-10)


class TestScore:
    """Tests for the combined score."""

    def test_all_same_is_capped(self, cfg):
        assert score("1111", cfg) == 100

    def test_floor_at_zero(self, cfg):
        # rhythm 7.2 minus the unlucky 4 penalty
        assert breakdown("1409", cfg).raw_total == pytest.approx(-2.8)
        assert score("1409", cfg) == 0

    def test_palindrome(self, cfg):
        assert score("1221", cfg) == pytest.approx(65.2823, abs=1e-3)

    def test_palindrome_beats_similar_non_palindrome(self, cfg):
        pal = breakdown("1221", cfg)
        other = breakdown("1222", cfg)
        assert pal.features["pattern"] - other.features["pattern"] == 25

    def test_ascending(self, cfg):
        assert score("1234", cfg) == pytest.approx(75.28)

    def test_alternating(self, cfg):
        assert score("1212", cfg) == pytest.approx(81.8)

    def test_range(self, cfg):
        samples = ["0000", "1409", "12345", "987654", "4444444", "13579246", "44440000", "7070707"]
        for number in samples:
            assert 0 <= score(number, cfg) <= 100

    def test_zero_weights(self):
        cfg = ScoringConfig(
            repetition=0, sequence=0, pattern=0, periodic=0,
            alternation=0, rhythm=0, unique_digit=0,
            lucky_tokens=(), unlucky_tokens=(),
        )
        assert score("8888", cfg) == 0

    def test_deterministic(self, cfg):
        assert score("90210", cfg) == score("90210", cfg)

    def test_breakdown_matches_score(self, cfg):
        result = breakdown("77889", cfg)
        assert result.total == score("77889", cfg)
        assert set(result.features) == set(result.weights)

    def test_breakdown_to_dict(self, cfg):
        data = breakdown("1234", cfg).to_dict()
        assert data["rounded"] == 75
        assert data["tier"] == "Gold"

    def test_length_multipliers(self):
        cfg = ScoringConfig(length_multipliers={4: {"pattern": 2.0}})
        assert cfg.weights(4)["pattern"] == pytest.approx(3.0)
        assert cfg.weights(5)["pattern"] == pytest.approx(1.5)
        assert breakdown("1221", cfg).raw_total == pytest.approx(65.2823 + 37.5, abs=1e-3)
        assert score("1221", cfg) == 100


class TestTiers:
    """Tests for classify() and the Tier enum."""

    @pytest.mark.parametrize("value,expected", [
        (100, Tier.PREMIUM),
        (95, Tier.PREMIUM),
        (94.5, Tier.PREMIUM),
        (94.49, Tier.PLATINUM),
        (90, Tier.PLATINUM),
        (89, Tier.GOLD),
        (75, Tier.GOLD),
        (74.5, Tier.GOLD),
        (74, Tier.SILVER),
        (50, Tier.SILVER),
        (49, Tier.BRONZE),
        (0, Tier.BRONZE),
    ])
    def test_boundaries(self, value, expected):
        assert classify(value) is expected

    def test_every_integer_has_one_tier(self):
        previous = None
        for value in range(0, 101):
            tier = classify(value)
            assert tier.label in TIER_NAMES
            if previous is not None:
                # monotonic: tiers never get worse as the score rises
                assert TIER_NAMES.index(tier.label) <= TIER_NAMES.index(previous.label)
            previous = tier

    def test_round_half_up(self):
        assert round_score(74.5) == 75
        assert round_score(64.49) == 64
        assert round_score(0.5) == 1

    def test_from_name(self):
        assert Tier.from_name("gold") is Tier.GOLD
        assert Tier.from_name(" Premium ") is Tier.PREMIUM
        assert Tier.from_name(Tier.SILVER) is Tier.SILVER

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="Unknown tier"):
            Tier.from_name("Diamond")

    def test_str(self):
        assert str(Tier.BRONZE) == "Bronze"
