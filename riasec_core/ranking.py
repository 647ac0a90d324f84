"""Rank candidate majors against a trait profile.

The profile's first six letters get positional-decay weights 1, 1/2, ..., 1/6.
A candidate scores the sum of the weights of its own letters; ordering is by
score descending, then by name ascending, so the output is fully determined
by the profile and the catalog.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .config import PROFILE_LENGTH, SCORE_TIE_DIGITS, TOP_N_PERSISTED
from .question_bank import LETTERS
from .types import Candidate, ScoredCandidate

PROFILE_WEIGHTS: tuple[float, ...] = tuple(1.0 / (p + 1) for p in range(PROFILE_LENGTH))


def normalize_profile(profile: Optional[str]) -> str:
    """Upper-case, keep only trait letters, cut to six."""
    letters = [ch for ch in str(profile or "").upper() if ch in LETTERS]
    return "".join(letters[:PROFILE_LENGTH])


def weight_map(profile: Optional[str]) -> Dict[str, float]:
    weights: Dict[str, float] = {}
    for idx, letter in enumerate(normalize_profile(profile)):
        weights[letter] = PROFILE_WEIGHTS[idx]
    return weights


def _candidate_letters(codes: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for code in codes or ():
        letter = str(code or "").strip().upper()[:1]
        if letter and letter not in seen:
            seen.append(letter)
    return seen


def score_candidate(profile: Optional[str], codes: Iterable[str], weights: Optional[Dict[str, float]] = None) -> float:
    w = weights if weights is not None else weight_map(profile)
    if not w:
        return 0.0
    return float(sum(w.get(letter, 0.0) for letter in _candidate_letters(codes)))


def _sort_key(entry: ScoredCandidate) -> tuple[float, str]:
    # bucket near-equal floats so the name decides
    return (-round(entry.score, SCORE_TIE_DIGITS), entry.name)


def rank_candidates(
    profile: Optional[str],
    catalog: Sequence[Candidate],
    limit: Optional[int] = TOP_N_PERSISTED,
) -> List[ScoredCandidate]:
    weights = weight_map(profile)
    scored = [
        ScoredCandidate(name=c.name, codes=tuple(c.codes), score=score_candidate(profile, c.codes, weights))
        for c in catalog
    ]
    scored.sort(key=_sort_key)
    if limit is None:
        return scored
    return scored[: max(0, int(limit))]


__all__ = ["PROFILE_WEIGHTS", "normalize_profile", "weight_map", "score_candidate", "rank_candidates"]
