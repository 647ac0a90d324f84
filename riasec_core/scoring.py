from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping, Tuple

from .config import ITEM_COUNT
from .errors import ScoreInvariantViolation
from .question_bank import LETTERS


def empty_scores() -> Dict[str, int]:
    return {letter: 0 for letter in LETTERS}


def _letter(value: Any) -> str:
    s = str(value or "").strip().upper()
    return s if s in LETTERS else ""


def scores_from_responses(rows: Iterable[Mapping[str, Any]], expected: int = ITEM_COUNT) -> Dict[str, int]:
    """
    Recount trait scores from persisted response rows.

    Rows with an unknown chosen code are not counted, so they surface through
    the sum check rather than being silently remapped.
    """
    scores = empty_scores()
    for row in rows:
        letter = _letter(row.get("chosen_code"))
        if letter:
            scores[letter] += 1
    total = sum(scores.values())
    if total != expected:
        raise ScoreInvariantViolation(f"computed scores sum must equal {expected}, received {total}")
    return scores


def profile_from_scores(scores: Mapping[str, int]) -> str:
    # descending count, ties alphabetical by letter
    ordered = sorted(LETTERS, key=lambda letter: (-int(scores.get(letter, 0)), letter))
    return "".join(ordered)


def score_and_profile(rows: Iterable[Mapping[str, Any]], expected: int = ITEM_COUNT) -> Tuple[Dict[str, int], str]:
    scores = scores_from_responses(rows, expected)
    return scores, profile_from_scores(scores)
