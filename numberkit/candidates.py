#!/usr/bin/env python3
"""
Candidate Sources
=================
Digit strings for the generator to classify, in two phases:

1. structured_candidates(): deterministic templates covering the
   high-scoring shapes (repeats, palindromes, runs, tilings, pair blocks,
   lucky-token seeds). Finite; calling it again restarts it.
2. RandomCandidates: uniform random samples, bounded by an attempt cap,
   skipping anything already seen. Not reproducible unless a seeded
   random.Random is supplied.

Both yield plain strings, so the generator's accept/reject loop does not
care which phase a candidate came from.
"""

import random
from itertools import chain
from typing import Callable, Iterable, Iterator, Optional, Set

DIGITS = "0123456789"

_rng = random.Random()


def get_rng() -> random.Random:
    """Process-wide random source for sampling (not cryptographic)."""
    return _rng


# =============================================================================
# Structured Templates
# =============================================================================

def repeats(length: int) -> Iterator[str]:
    """0000, 1111, ... and, for 4 digits, AAAB / AABB / ABBB."""
    for a in DIGITS:
        yield a * length
        if length != 4:
            continue
        for b in DIGITS:
            if a == b:
                continue
            yield a * 3 + b
            yield a * 2 + b * 2
            yield a + b * 3


def palindromes(length: int) -> Iterator[str]:
    """Every palindrome of the given length without a leading zero."""
    half = (length + 1) // 2
    for i in range(10 ** (half - 1), 10 ** half):
        first = str(i)
        mirrored = first[::-1]
        yield first + (mirrored[1:] if length % 2 else mirrored)


def straight_runs(length: int) -> Iterator[str]:
    """Full-length ascending and descending +-1 runs (0123..., 9876...)."""
    for start in range(0, 11 - length):
        yield ''.join(str(start + j) for j in range(length))
        yield ''.join(str(9 - start - j) for j in range(length))


def two_digit_tilings(length: int) -> Iterator[str]:
    """ABAB... truncated to length, A != B."""
    for a in DIGITS:
        for b in DIGITS:
            if a == b:
                continue
            yield ((a + b) * ((length + 1) // 2))[:length]


def three_digit_tilings(length: int) -> Iterator[str]:
    """ABCABC... with distinct A, B, C, only when length divides by 3."""
    if length % 3 != 0:
        return
    for a in DIGITS:
        for b in DIGITS:
            for c in DIGITS:
                if a == b or b == c or a == c:
                    continue
                yield (a + b + c) * (length // 3)


def pair_blocks(length: int) -> Iterator[str]:
    """AABB for 4 digits, AABBCC (C distinct from A and B) for 6 digits."""
    pairs = length // 2
    if length % 2 != 0 or pairs not in (2, 3):
        return
    for a in DIGITS:
        for b in DIGITS:
            if pairs == 2:
                yield a * 2 + b * 2
                continue
            for c in DIGITS:
                if c == a or c == b:
                    continue
                yield a * 2 + b * 2 + c * 2


def token_seeded(length: int, tokens: Iterable[str]) -> Iterator[str]:
    """Lucky tokens placed at the start, middle and end of a one-digit pad."""
    for tok in sorted(tokens):
        if not tok or len(tok) > length:
            continue
        remaining = length - len(tok)
        for d in DIGITS:
            pad = d * remaining
            yield pad[:remaining // 2] + tok + pad[remaining // 2:]
            yield tok + pad
            yield pad + tok


def structured_candidates(length: int, lucky_tokens: Iterable[str] = ()) -> Iterator[str]:
    """All structured templates for a length, de-duplicated, in a fixed order."""
    seen = set()
    sources = chain(
        repeats(length),
        palindromes(length),
        straight_runs(length),
        two_digit_tilings(length),
        three_digit_tilings(length),
        pair_blocks(length),
        token_seeded(length, lucky_tokens),
    )
    for candidate in sources:
        if candidate in seen:
            continue
        seen.add(candidate)
        yield candidate


# =============================================================================
# Random Sampling
# =============================================================================

class RandomCandidates:
    """
    Uniform random digit strings of a fixed length.

    Each draw counts as one attempt, including draws skipped because the
    string was already seen. Iteration ends when the attempt cap is hit or
    when should_stop() returns True (checked before every draw).
    """

    def __init__(self,
                 length: int,
                 max_attempts: int,
                 seen: Optional[Set[str]] = None,
                 should_stop: Optional[Callable[[], bool]] = None,
                 rng: Optional[random.Random] = None):
        self.length = length
        self.max_attempts = max_attempts
        self.seen = seen if seen is not None else set()
        self.should_stop = should_stop or (lambda: False)
        self.rng = rng or get_rng()
        self.attempts = 0

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def __iter__(self) -> Iterator[str]:
        upper = 10 ** self.length - 1
        while not self.exhausted and not self.should_stop():
            self.attempts += 1
            candidate = str(self.rng.randint(0, upper)).zfill(self.length)
            if candidate in self.seen:
                continue
            self.seen.add(candidate)
            yield candidate
