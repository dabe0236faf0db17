#!/usr/bin/env python3
"""
Cultural Annotations
====================
Explains which lucky/unlucky associations a number triggers under one
culture profile. Annotations are informational only; the score uses the
configured token sets (see numberkit.scoring.cultural_adjustment).
"""

from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple

from numberkit.config import CultureProfile, ProfileEntry, ScoringConfig, default_config

LUCKY = "lucky"
UNLUCKY = "unlucky"


@dataclass(frozen=True)
class CulturalNote:
    """One matched association."""
    type: str  # 'lucky' or 'unlucky'
    token: str
    region: str
    reason: str

    def to_dict(self) -> dict:
        return asdict(self)


class CulturalAnnotator:
    """
    Matches a number against a culture profile.

    Lucky entries come first, then unlucky ones, each in profile order.
    Every annotation of a matching token yields its own note.
    """

    def __init__(self, profile: CultureProfile):
        self.profile = profile

    @classmethod
    def for_config(cls, config: Optional[ScoringConfig] = None) -> "CulturalAnnotator":
        if config is None:
            config = default_config()
        return cls(config.profile)

    def annotate(self, number: str) -> Tuple[CulturalNote, ...]:
        notes: List[CulturalNote] = []
        notes.extend(self._match(number, self.profile.lucky, LUCKY))
        notes.extend(self._match(number, self.profile.unlucky, UNLUCKY))
        return tuple(notes)

    def _match(self, number: str, entries: Tuple[ProfileEntry, ...], label: str) -> List[CulturalNote]:
        matched = []
        for token, annotations in entries:
            if not token.matches(number):
                continue
            for info in annotations:
                matched.append(CulturalNote(
                    type=label,
                    token=token.label,
                    region=info.region,
                    reason=info.reason,
                ))
        return matched


def annotate(number: str, config: Optional[ScoringConfig] = None) -> Tuple[CulturalNote, ...]:
    """Cultural notes for a number under the config's active profile."""
    return CulturalAnnotator.for_config(config).annotate(number)
