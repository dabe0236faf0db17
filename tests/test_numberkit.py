"""
Tests for the NumberKit Facade
==============================
Tests for the NumberKit class in numberkit/__init__.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import numberkit
from numberkit import NumberKit, ScoringConfig, Tier, ValidationError


@pytest.fixture
def kit():
    return NumberKit(ScoringConfig())


class TestNumberKit:
    """Tests for the main interface."""

    def test_version(self):
        assert numberkit.__version__ == "0.1.0"

    def test_default_config_from_settings(self):
        assert NumberKit().config.repetition == 1.8

    def test_length_aware(self):
        assert NumberKit(length_aware=True).config.weights(4)["pattern"] == pytest.approx(1.95)

    def test_score_and_classify(self, kit):
        assert kit.score("1212") == pytest.approx(81.8)
        assert kit.classify(81.8) is Tier.GOLD

    def test_categorize(self, kit):
        assert kit.categorize("1221").subcategory == "Silver"
        assert isinstance(kit.categorize("12"), ValidationError)

    def test_use_profile(self, kit):
        kit.use_profile("china")
        assert kit.config.active_profile == "china"
        assert [n.token for n in kit.categorize("4444").notes] == ["4"]

    def test_use_unknown_profile(self, kit):
        with pytest.raises(ValueError):
            kit.use_profile("atlantis")
        assert kit.config.active_profile == "global"

    def test_update_weights(self, kit):
        before = kit.score("1221")
        kit.update_weights(pattern=0)
        assert kit.config.pattern == 0.0
        assert kit.score("1221") < before

    def test_update_unknown_weight(self, kit):
        with pytest.raises(ValueError, match="Unknown weights"):
            kit.update_weights(colour=1.0)

    def test_set_tokens(self, kit):
        kit.set_tokens(lucky="9", unlucky=[])
        assert kit.config.lucky_tokens == frozenset({"9"})
        assert kit.config.unlucky_tokens == frozenset()
        assert kit.score("1409") == pytest.approx(12.2)

    def test_config_setter_type_check(self, kit):
        with pytest.raises(TypeError):
            kit.config = {"repetition": 1.0}

    def test_generate(self, kit):
        results = kit.generate(4, "Premium", 3)
        assert [r.subcategory for r in results] == ["Premium"] * 3

    def test_suggest(self, kit):
        assert [r.number for r in kit.suggest("1294", 2)] == ["1212", "1221"]
