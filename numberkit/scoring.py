#!/usr/bin/env python3
"""
Number Scoring
==============
Memorability score for short digit strings and the tier mapping.

The score is a weighted sum of seven pattern features plus an unweighted
cultural adjustment, clamped to [0, 100]:

    repetition    sum of run_length ** 2.5 over equal-digit runs (len >= 2)
    sequence      15 per +-1 step 3-window, plus 4.7 per digit of the
                  longest +-1 run when it spans 4 or more digits
    pattern       palindrome, paired digits, AABB / ABAB motifs
    periodic      (len / minimal_period - 1) * 12
    alternation   15 for a two-digit ABAB... tiling
    rhythm        (len / runs) * 6
    unique_digit  (len - distinct_digits) * 5

All functions here are pure; the input is assumed to be a validated digit
string (see numberkit.categorizer).
"""

import math
import re
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional

from numberkit.config import ScoringConfig, WEIGHT_NAMES, default_config

SCORE_MIN = 0.0
SCORE_MAX = 100.0

REPETITION_EXPONENT = 2.5
SEQUENCE_WINDOW_BONUS = 15.0
MONOTONIC_MIN_RUN = 4
MONOTONIC_PER_STEP = 4.7
PALINDROME_BONUS = 25.0
PAIRED_DIGITS_BONUS = 14.0
MOTIF_BONUS = 20.0
PERIODIC_PER_REPEAT = 12.0
ALTERNATION_BONUS = 15.0
RHYTHM_FACTOR = 6.0
UNIQUE_DIGIT_FACTOR = 5.0

_AABB_RE = re.compile(r"([0-9])\1([0-9])\2")
_ABAB_RE = re.compile(r"([0-9])([0-9])\1\2")


# =============================================================================
# Tiers
# =============================================================================

class Tier(Enum):
    """Quality tiers, best first. Value is the inclusive lower bound."""
    PREMIUM = ("Premium", 95)
    PLATINUM = ("Platinum", 90)
    GOLD = ("Gold", 75)
    SILVER = ("Silver", 50)
    BRONZE = ("Bronze", 0)

    def __init__(self, label: str, threshold: int):
        self.label = label
        self.threshold = threshold

    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_name(cls, name) -> "Tier":
        """Look up a tier by label, case-insensitively."""
        if isinstance(name, cls):
            return name
        for tier in cls:
            if tier.label.lower() == str(name).strip().lower():
                return tier
        available = ', '.join(t.label for t in cls)
        raise ValueError(f"Unknown tier '{name}'. Available tiers: {available}")


TIER_NAMES = [t.label for t in Tier]


def round_score(value: float) -> int:
    """Round half up (74.5 -> 75)."""
    return int(math.floor(value + 0.5))


def classify(score: float) -> Tier:
    """Map a score to its tier (score is rounded first)."""
    rounded = round_score(score)
    for tier in Tier:
        if rounded >= tier.threshold:
            return tier
    return Tier.BRONZE


# =============================================================================
# Features
# =============================================================================

def digit_runs(number: str) -> List[int]:
    """Lengths of maximal equal-digit runs, left to right."""
    runs = []
    i = 0
    while i < len(number):
        j = i + 1
        while j < len(number) and number[j] == number[i]:
            j += 1
        runs.append(j - i)
        i = j
    return runs


def minimal_period(number: str) -> int:
    """Shortest prefix length whose repetition rebuilds the whole string."""
    n = len(number)
    for p in range(1, n):
        if n % p != 0:
            continue
        if number[:p] * (n // p) == number:
            return p
    return n


def longest_monotonic_run(number: str) -> int:
    """Longest stretch of strict +1 or strict -1 steps, counted in digits."""
    if not number:
        return 0
    inc = dec = longest = 1
    for prev, curr in zip(number, number[1:]):
        diff = int(curr) - int(prev)
        if diff == 1:
            inc += 1
            dec = 1
        elif diff == -1:
            dec += 1
            inc = 1
        else:
            inc = dec = 1
        longest = max(longest, inc, dec)
    return longest


def is_palindrome(number: str) -> bool:
    return number == number[::-1]


def repetition_score(number: str) -> float:
    return sum(run ** REPETITION_EXPONENT for run in digit_runs(number) if run >= 2)


def sequence_score(number: str) -> float:
    score = 0.0
    for i in range(len(number) - 2):
        d1, d2, d3 = int(number[i]), int(number[i + 1]), int(number[i + 2])
        if d2 - d1 == 1 and d3 - d2 == 1:
            score += SEQUENCE_WINDOW_BONUS
        if d1 - d2 == 1 and d2 - d3 == 1:
            score += SEQUENCE_WINDOW_BONUS
    longest = longest_monotonic_run(number)
    if longest >= MONOTONIC_MIN_RUN:
        score += longest * MONOTONIC_PER_STEP
    return score


def pattern_score(number: str) -> float:
    score = 0.0
    if is_palindrome(number):
        score += PALINDROME_BONUS
    if len(number) % 2 == 0:
        if all(number[i] == number[i + 1] for i in range(0, len(number), 2)):
            score += PAIRED_DIGITS_BONUS
        if _AABB_RE.search(number) or _ABAB_RE.search(number):
            score += MOTIF_BONUS
    return score


def periodic_score(number: str) -> float:
    p = minimal_period(number)
    if p < len(number):
        return (len(number) / p - 1) * PERIODIC_PER_REPEAT
    return 0.0


def alternation_score(number: str) -> float:
    if minimal_period(number) == 2 and number[0] != number[1]:
        return ALTERNATION_BONUS
    return 0.0


def rhythm_score(number: str) -> float:
    runs = len(digit_runs(number))
    if runs == 0:
        return 0.0
    return (len(number) / runs) * RHYTHM_FACTOR


def unique_digit_score(number: str) -> float:
    return (len(number) - len(set(number))) * UNIQUE_DIGIT_FACTOR


def cultural_adjustment(number: str, config: ScoringConfig) -> float:
    """Unweighted bonus/penalty for configured lucky and unlucky tokens."""
    adjustment = 0.0
    for token in config.lucky_tokens:
        if token in number:
            adjustment += config.lucky_bonus
    for token in config.unlucky_tokens:
        if token in number:
            adjustment += config.unlucky_penalty
    return adjustment


FEATURES = {
    "repetition": repetition_score,
    "sequence": sequence_score,
    "pattern": pattern_score,
    "periodic": periodic_score,
    "alternation": alternation_score,
    "rhythm": rhythm_score,
    "unique_digit": unique_digit_score,
}


# =============================================================================
# Score
# =============================================================================

@dataclass(frozen=True)
class ScoreBreakdown:
    """Raw feature scores and how they add up."""
    number: str
    features: Dict[str, float]
    weights: Dict[str, float]
    cultural: float
    raw_total: float
    total: float

    @property
    def rounded(self) -> int:
        return round_score(self.total)

    @property
    def tier(self) -> Tier:
        return classify(self.total)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["rounded"] = self.rounded
        data["tier"] = self.tier.label
        return data


def breakdown(number: str, config: Optional[ScoringConfig] = None) -> ScoreBreakdown:
    """Score a number and keep every intermediate value."""
    if config is None:
        config = default_config()
    weights = config.weights(len(number))
    features = {name: FEATURES[name](number) for name in WEIGHT_NAMES}
    cultural = cultural_adjustment(number, config)
    raw_total = sum(features[name] * weights[name] for name in WEIGHT_NAMES) + cultural
    total = min(max(raw_total, SCORE_MIN), SCORE_MAX)
    return ScoreBreakdown(
        number=number,
        features=features,
        weights=weights,
        cultural=cultural,
        raw_total=raw_total,
        total=total,
    )


def score(number: str, config: Optional[ScoringConfig] = None) -> float:
    """Clamped score in [0, 100] for a validated digit string."""
    return breakdown(number, config).total
