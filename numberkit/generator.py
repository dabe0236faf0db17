#!/usr/bin/env python3
"""
Number Generation
=================
Search for numbers of a given length that land in a target tier.

Structured templates are classified first (all of them, so the best
matches are never missed), then uniform random samples fill the
remainder until `count` matches are found or the attempt cap runs out.
A sparse or unreachable tier returns fewer results, possibly none.

Usage:
    from numberkit.generator import Generator

    gen = Generator()
    for item in gen.generate(6, "Gold", 10):
        print(item.number, item.score)
"""

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple, Union

from numberkit.candidates import RandomCandidates, get_rng, structured_candidates
from numberkit.categorizer import Assessment, ValidationError, assess, is_valid_number, validation_message
from numberkit.config import ScoringConfig, default_config
from numberkit.scoring import Tier, classify, round_score, score
from numberkit.settings import get_setting

logger = logging.getLogger(__name__)

PHASE_STRUCTURED = 1
PHASE_RANDOM = 2

MIN_LENGTH = 4
MAX_LENGTH = 8

# Share of the overall run each phase is assumed to cover, for the ETA.
STRUCTURED_START = 0.15
RANDOM_START = 0.70


class GenerationCancelled(Exception):
    """Raised when a running generation is cancelled; partial results are dropped."""


class GenerationControl:
    """
    Pause, resume and cancel flags shared between a running generation
    and its caller. A paused run blocks before its next candidate.
    """

    def __init__(self):
        self._cancelled = threading.Event()
        self._running = threading.Event()
        self._running.set()

    def cancel(self):
        self._cancelled.set()
        self._running.set()

    def pause(self):
        self._running.clear()
        if self.cancelled:
            self._running.set()

    def resume(self):
        self._running.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def paused(self) -> bool:
        return not self._running.is_set()

    def wait_if_paused(self):
        self._running.wait()


@dataclass(frozen=True)
class GenerationProgress:
    """Progress snapshot passed to on_progress callbacks."""
    phase: int          # 1 = structured templates, 2 = random sampling
    examined: int       # candidates classified so far (both phases)
    found: int
    target: int
    random_attempts: int
    fraction: float = 0.0                # estimated share of the run done
    eta_seconds: Optional[float] = None  # None until there is a rate to go by


def eta_seconds(started: float, fraction: float, now: Optional[float] = None) -> Optional[float]:
    """Remaining seconds, extrapolated from the time taken for `fraction` of the run."""
    if fraction <= 0:
        return None
    elapsed = (time.monotonic() if now is None else now) - started
    return max(0.0, elapsed / fraction - elapsed)


def _check_length(length: int) -> int:
    if not isinstance(length, int) or not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValueError(f"length must be between {MIN_LENGTH} and {MAX_LENGTH}, got {length!r}")
    return length


class Generator:
    """
    Finds numbers matching a tier.

    Parameters
    ----------
    config : ScoringConfig, optional
        Scoring configuration; defaults to app.yaml.
    rng : random.Random, optional
        Random source for the sampling phase (seed one for repeatable runs).
    max_attempts : int, optional
        Random sampling budget; defaults to generator.max_attempts.
    """

    def __init__(self,
                 config: Optional[ScoringConfig] = None,
                 rng: Optional[random.Random] = None,
                 max_attempts: Optional[int] = None,
                 progress_interval: Optional[int] = None):
        self.config = config if config is not None else default_config()
        self.rng = rng or get_rng()
        if max_attempts is None:
            max_attempts = get_setting("generator.max_attempts")
        if progress_interval is None:
            progress_interval = get_setting("generator.progress_interval", 512)
        if max_attempts is None:
            raise ValueError("generator.max_attempts must be set in app.yaml")
        self.max_attempts = int(max_attempts)
        self.progress_interval = max(1, int(progress_interval))

    def generate(self,
                 length: int,
                 tier: Union[Tier, str],
                 count: int,
                 control: Optional[GenerationControl] = None,
                 on_progress: Optional[Callable[[GenerationProgress], None]] = None,
                 on_match: Optional[Callable[[Assessment], None]] = None) -> List[Assessment]:
        """
        Generate up to `count` numbers in `tier`.

        `control` can pause, resume or cancel the search from another
        thread. `on_progress` receives a GenerationProgress every
        progress_interval candidates, with an ETA once one can be estimated.

        Returns
        -------
        list[Assessment]
            Unique numbers, best score first (ties by number).

        Raises
        ------
        ValueError
            If length is outside 4..8, the tier is unknown, or count < 1.
        GenerationCancelled
            If `control` was cancelled before the search finished.
        """
        length = _check_length(length)
        target = Tier.from_name(tier)
        if not isinstance(count, int) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")
        control = control or GenerationControl()

        accepted: Dict[str, Assessment] = {}
        seen: Set[str] = set()
        sampler = RandomCandidates(
            length,
            self.max_attempts,
            seen=seen,
            should_stop=lambda: len(accepted) >= count or control.cancelled,
            rng=self.rng,
        )

        structured = list(structured_candidates(length, self.config.lucky_tokens))
        seen.update(structured)
        started = time.monotonic()

        examined = 0
        for phase, candidate in self._candidates(length, structured, sampler):
            control.wait_if_paused()
            if control.cancelled:
                break
            examined += 1
            if classify(score(candidate, self.config)) is target and candidate not in accepted:
                found = assess(candidate, self.config)
                accepted[candidate] = found
                if on_match:
                    on_match(found)
            if on_progress and examined % self.progress_interval == 0:
                if phase == PHASE_STRUCTURED:
                    done = examined / max(1, len(structured))
                    fraction = STRUCTURED_START + (RANDOM_START - STRUCTURED_START) * done
                else:
                    done = sampler.attempts / max(1, self.max_attempts)
                    fraction = RANDOM_START + (1.0 - RANDOM_START) * min(1.0, done)
                on_progress(GenerationProgress(
                    phase, examined, len(accepted), count, sampler.attempts,
                    fraction=fraction,
                    eta_seconds=eta_seconds(started, fraction),
                ))

        if control.cancelled:
            logger.debug(f"Generation cancelled after {examined} candidates")
            raise GenerationCancelled(f"generation of {length}-digit {target.label} numbers was cancelled")

        if len(accepted) < count and sampler.exhausted:
            logger.info(
                f"Attempt budget ({self.max_attempts}) exhausted: found {len(accepted)}/{count} "
                f"{length}-digit {target.label} numbers"
            )

        results = sorted(accepted.values(), key=lambda a: (-a.score, a.number))
        return results[:count]

    def _candidates(self, length: int, structured: List[str],
                    sampler: RandomCandidates) -> Iterator[Tuple[int, str]]:
        for candidate in structured:
            yield PHASE_STRUCTURED, candidate
        logger.debug(f"{len(structured)} structured {length}-digit candidates classified")
        for candidate in sampler:
            yield PHASE_RANDOM, candidate
        logger.debug(f"Random phase stopped after {sampler.attempts} attempts")

    def suggest_nearby(self, number: str, count: Optional[int] = None) -> Union[List[Assessment], ValidationError]:
        """
        Suggest small edits of `number` that score higher.

        Tried variants: the palindrome built from the first half, copying
        each digit's left neighbour over it, an AB alternation of the first
        two digits, and each lucky token placed at the start, middle and end
        of a pad made of the first digit.
        """
        if not is_valid_number(number):
            return ValidationError(error=validation_message())
        if count is None:
            count = int(get_setting("generator.suggest_count", 5))

        base = round_score(score(number, self.config))
        better = []
        for variant in sorted(nearby_variants(number, self.config.lucky_tokens)):
            if variant == number or len(variant) != len(number):
                continue
            if round_score(score(variant, self.config)) > base:
                better.append(assess(variant, self.config))

        better.sort(key=lambda a: (-a.score, a.number))
        return better[:count]


def to_palindrome(number: str) -> str:
    first = number[:(len(number) + 1) // 2]
    mirrored = first[::-1]
    return first + (mirrored[1:] if len(number) % 2 else mirrored)


def nearby_variants(number: str, lucky_tokens=()) -> Set[str]:
    """Candidate edits of a number (may include the number itself)."""
    length = len(number)
    variants = {to_palindrome(number)}

    for i in range(1, length):
        variants.add(number[:i] + number[i - 1] + number[i + 1:])

    a, b = number[0], number[1]
    if a != b:
        variants.add(((a + b) * ((length + 1) // 2))[:length])

    for tok in lucky_tokens:
        if len(tok) > length:
            continue
        remaining = length - len(tok)
        pad = number[0] * remaining
        variants.add(tok + pad)
        variants.add(pad[:remaining // 2] + tok + pad[remaining // 2:])
        variants.add(pad + tok)

    return variants


def generate(length: int,
             tier: Union[Tier, str],
             count: int,
             config: Optional[ScoringConfig] = None,
             **kwargs) -> List[Assessment]:
    """Shortcut for Generator(config).generate(length, tier, count)."""
    return Generator(config).generate(length, tier, count, **kwargs)


def suggest_nearby(number: str,
                   count: Optional[int] = None,
                   config: Optional[ScoringConfig] = None) -> Union[List[Assessment], ValidationError]:
    """Shortcut for Generator(config).suggest_nearby(number, count)."""
    return Generator(config).suggest_nearby(number, count)
