#!/usr/bin/env python3
"""
NumberKit - Memorable Number Scoring & Generation
=================================================

Scores short digit strings (4-8 digit phone-number suffixes), buckets
them into quality tiers, explains cultural lucky/unlucky associations and
searches for numbers matching a target tier.

Quick Start
-----------
    from numberkit import NumberKit

    kit = NumberKit()

    # Categorize a number
    result = kit.categorize("8888")

    # Generate numbers in a tier
    numbers = kit.generate(6, "Gold", count=10)

    # Switch cultural lens
    kit.use_profile("china")

Modules
-------
    numberkit.scoring     - Score features and tier mapping
    numberkit.culture     - Cultural lucky/unlucky notes
    numberkit.categorizer - Validation and assessments
    numberkit.generator   - Tier-targeted number search
    numberkit.parallel    - Background generation with cancellation
    numberkit.calibration - Tier distribution per length
    numberkit.ui          - Live progress display for the CLI
    numberkit.config      - Scoring configuration and culture profiles

CLI Usage
---------
    python -m numberkit categorize 8888 --profile china
    python -m numberkit generate -l 6 -t Gold -n 10
    python -m numberkit profiles
"""

__version__ = "0.1.0"
__author__ = "NumberKit"

from typing import Iterable, List, Optional, Union

from . import config
from . import scoring
from . import culture
from . import categorizer
from . import generator

from .config import (
    ScoringConfig,
    CultureProfile,
    SubstringToken,
    LastDigitParity,
    Annotation,
    get_config,
    config_for_profile,
    list_profiles,
    parse_tokens,
    WEIGHT_NAMES,
)
from .scoring import Tier, TIER_NAMES, ScoreBreakdown, breakdown, classify, score
from .culture import CulturalNote, CulturalAnnotator, annotate
from .categorizer import Assessment, ValidationError, categorize, is_valid_number
from .generator import (
    Generator,
    GenerationControl,
    GenerationProgress,
    GenerationCancelled,
    generate,
    suggest_nearby,
)


# =============================================================================
# NumberKit Main Class
# =============================================================================

class NumberKit:
    """
    Main interface for scoring and generation.

    Holds the caller's current ScoringConfig. Every operation reads it,
    none of them changes it; the setters below swap in a new value.

    Examples
    --------
        >>> kit = NumberKit()
        >>> kit.categorize("1221").subcategory
        'Silver'
        >>> kit.use_profile("china")
        >>> [n.token for n in kit.categorize("4444").notes]
        ['4']
    """

    def __init__(self, scoring_config: Optional[ScoringConfig] = None, length_aware: bool = False):
        self._config = scoring_config or get_config(length_aware=length_aware)

    @property
    def config(self) -> ScoringConfig:
        return self._config

    @config.setter
    def config(self, value: ScoringConfig):
        if not isinstance(value, ScoringConfig):
            raise TypeError("config must be a ScoringConfig")
        self._config = value

    # -- configuration -------------------------------------------------------

    def use_profile(self, key: str):
        """Select a culture profile and take over its token sets."""
        self._config = config_for_profile(self._config, key)

    def update_weights(self, **weights: float):
        """Replace some of the seven feature weights."""
        unknown = set(weights) - set(WEIGHT_NAMES)
        if unknown:
            raise ValueError(f"Unknown weights: {', '.join(sorted(unknown))}")
        self._config = self._config.with_updates(**weights)

    def set_tokens(self,
                   lucky: Union[str, Iterable[str], None] = None,
                   unlucky: Union[str, Iterable[str], None] = None):
        """Replace the lucky and/or unlucky token sets (lists or "7, 8" strings)."""
        changes = {}
        if lucky is not None:
            changes["lucky_tokens"] = parse_tokens(lucky)
        if unlucky is not None:
            changes["unlucky_tokens"] = parse_tokens(unlucky)
        if changes:
            self._config = self._config.with_updates(**changes)

    # -- operations ----------------------------------------------------------

    def score(self, number: str) -> float:
        return score(number, self._config)

    def classify(self, value: float) -> Tier:
        return classify(value)

    def categorize(self, number: str) -> Union[Assessment, ValidationError]:
        return categorize(number, self._config)

    def generate(self, length: int, tier: Union[Tier, str], count: int = 10, **kwargs) -> List[Assessment]:
        return Generator(self._config).generate(length, tier, count, **kwargs)

    def suggest(self, number: str, count: Optional[int] = None) -> Union[List[Assessment], ValidationError]:
        return Generator(self._config).suggest_nearby(number, count)


__all__ = [
    "__version__",
    "NumberKit",
    "ScoringConfig",
    "CultureProfile",
    "SubstringToken",
    "LastDigitParity",
    "Annotation",
    "get_config",
    "config_for_profile",
    "list_profiles",
    "parse_tokens",
    "WEIGHT_NAMES",
    "Tier",
    "TIER_NAMES",
    "ScoreBreakdown",
    "breakdown",
    "classify",
    "score",
    "CulturalNote",
    "CulturalAnnotator",
    "annotate",
    "Assessment",
    "ValidationError",
    "categorize",
    "is_valid_number",
    "Generator",
    "GenerationControl",
    "GenerationProgress",
    "GenerationCancelled",
    "generate",
    "suggest_nearby",
]
