#!/usr/bin/env python3
"""
Scoring Configuration
=====================
Immutable scoring configuration and the cultural profile table.

A ScoringConfig is a plain value: callers build one (usually from
app.yaml via get_config()), derive variants with with_updates() or
config_for_profile(), and pass it into every scoring call. Nothing in
the scoring engine mutates it.
"""

import logging
import math
import re
from dataclasses import dataclass, field, replace
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from numberkit.settings import get_setting, load_cultures, on_reload, require_setting

logger = logging.getLogger(__name__)

WEIGHT_NAMES = (
    "repetition",
    "sequence",
    "pattern",
    "periodic",
    "alternation",
    "rhythm",
    "unique_digit",
)

DEFAULT_PROFILE = "global"
NO_PROFILE = "none"

_DIGITS_RE = re.compile(r"[0-9]+")


# =============================================================================
# Culture Tokens
# =============================================================================

@dataclass(frozen=True)
class SubstringToken:
    """Matches when the digits appear anywhere in the number."""
    digits: str

    @property
    def label(self) -> str:
        return self.digits

    def matches(self, number: str) -> bool:
        return self.digits in number


@dataclass(frozen=True)
class LastDigitParity:
    """Matches on the parity of the final digit."""
    even: bool = True

    @property
    def label(self) -> str:
        return "even" if self.even else "odd"

    def matches(self, number: str) -> bool:
        if not number:
            return False
        return (int(number[-1]) % 2 == 0) == self.even


CultureToken = Union[SubstringToken, LastDigitParity]


def parse_culture_token(key) -> CultureToken:
    """
    Turn a profile table key into a CultureToken.

    "even"/"odd" become parity tokens; anything else must be a digit string.
    """
    text = str(key).strip()
    if text in ("even", "odd"):
        return LastDigitParity(even=(text == "even"))
    if not _DIGITS_RE.fullmatch(text):
        raise ValueError(f"Culture token must be digits or 'even'/'odd', got {key!r}")
    return SubstringToken(text)


# =============================================================================
# Culture Profiles
# =============================================================================

@dataclass(frozen=True)
class Annotation:
    region: str
    reason: str


ProfileEntry = Tuple[CultureToken, Tuple[Annotation, ...]]


@dataclass(frozen=True)
class CultureProfile:
    """Lucky and unlucky token annotations for one cultural lens."""
    key: str
    lucky: Tuple[ProfileEntry, ...] = ()
    unlucky: Tuple[ProfileEntry, ...] = ()

    @property
    def lucky_substrings(self) -> List[str]:
        return [tok.label for tok, _ in self.lucky if isinstance(tok, SubstringToken)]

    @property
    def unlucky_substrings(self) -> List[str]:
        return [tok.label for tok, _ in self.unlucky if isinstance(tok, SubstringToken)]

    @property
    def is_empty(self) -> bool:
        return not self.lucky and not self.unlucky


def _build_entries(bag: Optional[dict], context: str) -> Tuple[ProfileEntry, ...]:
    entries = []
    for key, infos in (bag or {}).items():
        token = parse_culture_token(key)
        annotations = []
        for info in infos or []:
            if not isinstance(info, dict) or 'region' not in info or 'reason' not in info:
                raise ValueError(f"{context}.{key} entries need 'region' and 'reason'")
            annotations.append(Annotation(region=str(info['region']), reason=str(info['reason'])))
        entries.append((token, tuple(annotations)))
    return tuple(entries)


def build_profile(key: str, data: Optional[dict]) -> CultureProfile:
    """Build a CultureProfile from its raw table entry."""
    data = data or {}
    return CultureProfile(
        key=key,
        lucky=_build_entries(data.get('lucky'), f"{key}.lucky"),
        unlucky=_build_entries(data.get('unlucky'), f"{key}.unlucky"),
    )


@lru_cache(maxsize=1)
def load_profiles() -> Mapping[str, CultureProfile]:
    """Load all culture profiles from cultures.yaml, in file order."""
    raw = load_cultures()
    profiles = {str(key): build_profile(str(key), data) for key, data in raw.items()}
    if DEFAULT_PROFILE not in profiles:
        raise ValueError(f"cultures.yaml must define the '{DEFAULT_PROFILE}' profile")
    return MappingProxyType(profiles)


def get_profile(profiles: Mapping[str, CultureProfile],
                key: Optional[str],
                strict: bool = False) -> CultureProfile:
    """
    Resolve a profile key.

    Args:
        profiles: Profile table
        key: Profile name; None means the default profile
        strict: Raise on unknown keys instead of falling back to the default

    Raises:
        ValueError: If strict and the key is unknown
    """
    if key is None:
        key = DEFAULT_PROFILE
    profile = profiles.get(key)
    if profile is not None:
        return profile
    if strict:
        available = ', '.join(sorted(profiles.keys()))
        raise ValueError(f"Unknown profile '{key}'. Available profiles: {available}")
    return profiles.get(DEFAULT_PROFILE) or CultureProfile(key=DEFAULT_PROFILE)


def list_profiles() -> dict:
    """List all profiles with their lucky/unlucky token labels."""
    return {
        name: {
            "lucky": [tok.label for tok, _ in p.lucky],
            "unlucky": [tok.label for tok, _ in p.unlucky],
        }
        for name, p in load_profiles().items()
    }


# =============================================================================
# Scoring Configuration
# =============================================================================

def parse_tokens(value: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """
    Normalize a token list.

    Accepts a comma-separated string ("7, 8") or an iterable of strings.
    Blank entries are dropped.

    Raises:
        ValueError: If a token contains anything but digits
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        items = value.split(',')
    else:
        items = list(value)
    tokens = set()
    for item in items:
        tok = str(item).strip()
        if not tok:
            continue
        if not _DIGITS_RE.fullmatch(tok):
            raise ValueError(f"Token must contain only digits, got {tok!r}")
        tokens.add(tok)
    return frozenset(tokens)


@dataclass(frozen=True)
class ScoringConfig:
    """Weights, token sets and cultural profiles used for scoring."""
    repetition: float = 1.8
    sequence: float = 1.6
    pattern: float = 1.5
    periodic: float = 1.3
    alternation: float = 1.4
    rhythm: float = 1.2
    unique_digit: float = 0.8

    lucky_tokens: FrozenSet[str] = frozenset({"7", "8"})
    unlucky_tokens: FrozenSet[str] = frozenset({"4"})
    lucky_bonus: float = 5.0
    unlucky_penalty: float = -10.0

    active_profile: str = DEFAULT_PROFILE
    profiles: Mapping[str, CultureProfile] = field(default_factory=load_profiles, repr=False, hash=False)

    # {length: {weight_name: multiplier}}; missing entries mean 1.0
    length_multipliers: Mapping[int, Mapping[str, float]] = field(default_factory=dict, repr=False, hash=False)

    def __post_init__(self):
        for name in WEIGHT_NAMES:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                raise ValueError(f"Weight '{name}' must be a finite non-negative number, got {value!r}")
            object.__setattr__(self, name, float(value))

        for name in ("lucky_bonus", "unlucky_penalty"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ValueError(f"'{name}' must be a finite number, got {value!r}")
            object.__setattr__(self, name, float(value))

        object.__setattr__(self, "lucky_tokens", parse_tokens(self.lucky_tokens))
        object.__setattr__(self, "unlucky_tokens", parse_tokens(self.unlucky_tokens))
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))
        if self.active_profile not in self.profiles:
            logger.warning(f"Unknown profile '{self.active_profile}', falling back to '{DEFAULT_PROFILE}'")

        multipliers = {}
        for length, per_weight in (self.length_multipliers or {}).items():
            clean = {}
            for name, mul in (per_weight or {}).items():
                if name not in WEIGHT_NAMES:
                    raise ValueError(f"Unknown weight '{name}' in length multipliers for {length}")
                mul = float(mul)
                if not math.isfinite(mul) or mul < 0:
                    raise ValueError(f"Length multiplier {length}.{name} must be finite and non-negative")
                clean[name] = mul
            multipliers[int(length)] = MappingProxyType(clean)
        object.__setattr__(self, "length_multipliers", MappingProxyType(multipliers))

    @classmethod
    def from_settings(cls, length_aware: bool = False) -> "ScoringConfig":
        """Build the default configuration from app.yaml."""
        weights = require_setting("scoring.weights")
        missing = [name for name in WEIGHT_NAMES if weights.get(name) is None]
        if missing:
            raise ValueError(f"scoring.weights missing in app.yaml: {', '.join(missing)}")

        multipliers = {}
        if length_aware:
            multipliers = require_setting("scoring.length_aware")

        return cls(
            **{name: weights[name] for name in WEIGHT_NAMES},
            lucky_tokens=get_setting("scoring.lucky_tokens", []),
            unlucky_tokens=get_setting("scoring.unlucky_tokens", []),
            lucky_bonus=require_setting("scoring.lucky_bonus"),
            unlucky_penalty=require_setting("scoring.unlucky_penalty"),
            active_profile=get_setting("scoring.default_profile", DEFAULT_PROFILE),
            length_multipliers=multipliers,
        )

    def weights(self, length: Optional[int] = None) -> Dict[str, float]:
        """Effective weights, with the length multipliers applied if any."""
        per_length = self.length_multipliers.get(length, {}) if length is not None else {}
        return {name: getattr(self, name) * per_length.get(name, 1.0) for name in WEIGHT_NAMES}

    @property
    def profile(self) -> CultureProfile:
        """The active culture profile (falls back to the default)."""
        return get_profile(self.profiles, self.active_profile)

    def with_updates(self, **changes) -> "ScoringConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


def config_for_profile(config: ScoringConfig, key: str) -> ScoringConfig:
    """
    Switch to a culture profile.

    Besides selecting the profile for annotations, the lucky/unlucky token
    sets are replaced by the profile's substring tokens. The "none" profile
    clears both sets.
    """
    profile = get_profile(config.profiles, key, strict=True)
    if key == NO_PROFILE:
        lucky, unlucky = frozenset(), frozenset()
    else:
        lucky = frozenset(profile.lucky_substrings)
        unlucky = frozenset(profile.unlucky_substrings)
    return config.with_updates(active_profile=key, lucky_tokens=lucky, unlucky_tokens=unlucky)


def get_config(length_aware: bool = False) -> ScoringConfig:
    """Get the configuration described by app.yaml."""
    return ScoringConfig.from_settings(length_aware=length_aware)


@lru_cache(maxsize=1)
def default_config() -> ScoringConfig:
    """Cached app.yaml configuration, used when a caller passes None."""
    return get_config()


on_reload(load_profiles.cache_clear)
on_reload(default_config.cache_clear)
