#!/usr/bin/env python3
"""
Number Categorization
=====================
Validates a digit string and assembles its assessment: score, tier and
cultural notes.

Bad input is not an exception here. categorize() returns a
ValidationError value instead, so callers branch on the result type:

    result = categorize("12a4")
    if isinstance(result, ValidationError):
        print(result.error)
"""

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Tuple, Union

from numberkit.config import ScoringConfig, default_config
from numberkit.culture import CulturalAnnotator, CulturalNote
from numberkit.scoring import classify, round_score, score
from numberkit.settings import get_setting, on_reload

DEFAULT_ERROR_MESSAGE = "Input must be a 4 to 8 digit number."


@dataclass(frozen=True)
class Assessment:
    """Categorization of one number."""
    number: str
    digit_category: str
    subcategory: str
    score: int
    notes: Tuple[CulturalNote, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "digit_category": self.digit_category,
            "subcategory": self.subcategory,
            "score": self.score,
            "notes": [n.to_dict() for n in self.notes],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


@dataclass(frozen=True)
class ValidationError:
    """Returned instead of an Assessment when the input is malformed."""
    error: str

    def to_dict(self) -> dict:
        return {"error": self.error}

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


CategorizeResult = Union[Assessment, ValidationError]


@lru_cache(maxsize=1)
def _number_pattern() -> "re.Pattern":
    min_len = int(get_setting("categorizer.min_length", 4))
    max_len = int(get_setting("categorizer.max_length", 8))
    return re.compile(rf"[0-9]{{{min_len},{max_len}}}")


on_reload(_number_pattern.cache_clear)


def validation_message() -> str:
    return get_setting("categorizer.error_message", DEFAULT_ERROR_MESSAGE)


def is_valid_number(number) -> bool:
    """True for a string of 4 to 8 ASCII digits."""
    return isinstance(number, str) and _number_pattern().fullmatch(number) is not None


def digit_category(number: str) -> str:
    return f"{len(number)}-digit"


def assess(number: str, config: ScoringConfig) -> Assessment:
    """Build the assessment for an already-validated number."""
    value = score(number, config)
    return Assessment(
        number=number,
        digit_category=digit_category(number),
        subcategory=classify(value).label,
        score=round_score(value),
        notes=CulturalAnnotator(config.profile).annotate(number),
    )


def categorize(number, config: Optional[ScoringConfig] = None) -> CategorizeResult:
    """
    Categorize a number.

    Args:
        number: Candidate digit string
        config: Scoring configuration (defaults to app.yaml)

    Returns:
        Assessment on success, ValidationError if the input is not
        exactly 4 to 8 ASCII digits
    """
    if not is_valid_number(number):
        return ValidationError(error=validation_message())
    if config is None:
        config = default_config()
    return assess(number, config)
