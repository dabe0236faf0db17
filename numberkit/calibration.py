#!/usr/bin/env python3
"""
Tier Distribution
=================
How the scores of all numbers of a given length spread over the tiers.

Tier thresholds are fixed on the clamped 0-100 scale, so any change of
weights shifts how rare each tier is. This report shows that directly:
short lengths are scored exhaustively, longer ones from a uniform sample.
"""

import logging
import random
import statistics
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from numberkit.candidates import get_rng
from numberkit.config import ScoringConfig, default_config
from numberkit.scoring import Tier, classify, round_score, score
from numberkit.settings import get_setting

logger = logging.getLogger(__name__)


@dataclass
class TierDistribution:
    """Tier counts and score statistics for one digit length."""
    length: int
    examined: int
    exhaustive: bool
    counts: Dict[str, int] = field(default_factory=dict)
    mean: float = 0.0
    median: float = 0.0
    stdev: float = 0.0
    minimum: int = 0
    maximum: int = 0

    def share(self, tier) -> float:
        """Fraction of examined numbers in a tier."""
        if not self.examined:
            return 0.0
        return self.counts.get(Tier.from_name(tier).label, 0) / self.examined

    def to_dict(self) -> dict:
        return {
            "length": self.length,
            "examined": self.examined,
            "exhaustive": self.exhaustive,
            "counts": dict(self.counts),
            "mean": round(self.mean, 2),
            "median": round(self.median, 2),
            "stdev": round(self.stdev, 2),
            "min": self.minimum,
            "max": self.maximum,
        }


def _all_numbers(length: int) -> Iterator[str]:
    for i in range(10 ** length):
        yield str(i).zfill(length)


def _sampled_numbers(length: int, size: int, rng: random.Random) -> Iterator[str]:
    upper = 10 ** length - 1
    for _ in range(size):
        yield str(rng.randint(0, upper)).zfill(length)


def tier_distribution(length: int,
                      config: Optional[ScoringConfig] = None,
                      sample_size: Optional[int] = None,
                      exhaustive: Optional[bool] = None,
                      rng: Optional[random.Random] = None) -> TierDistribution:
    """
    Score numbers of one length and count them per tier.

    Args:
        length: Digit length (4-8)
        config: Scoring configuration (defaults to app.yaml)
        sample_size: Samples to draw when not exhaustive
        exhaustive: Force (or forbid) scoring every number; by default
            lengths up to calibration.exhaustive_max_length are exhaustive
        rng: Random source for sampling
    """
    if not 4 <= length <= 8:
        raise ValueError(f"length must be between 4 and 8, got {length}")
    config = config if config is not None else default_config()
    if exhaustive is None:
        exhaustive = length <= int(get_setting("calibration.exhaustive_max_length", 5))
    if sample_size is None:
        sample_size = int(get_setting("calibration.sample_size", 20000))

    numbers = _all_numbers(length) if exhaustive else _sampled_numbers(length, sample_size, rng or get_rng())

    counts = {t.label: 0 for t in Tier}
    scores = []
    for number in numbers:
        value = score(number, config)
        counts[classify(value).label] += 1
        scores.append(round_score(value))

    logger.debug(f"Scored {len(scores)} {length}-digit numbers (exhaustive={exhaustive})")

    if not scores:
        return TierDistribution(length=length, examined=0, exhaustive=exhaustive, counts=counts)

    return TierDistribution(
        length=length,
        examined=len(scores),
        exhaustive=exhaustive,
        counts=counts,
        mean=statistics.fmean(scores),
        median=statistics.median(scores),
        stdev=statistics.pstdev(scores),
        minimum=min(scores),
        maximum=max(scores),
    )
