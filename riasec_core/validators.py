
from __future__ import annotations
import math, re
from typing import Any, List, Mapping, Optional, Sequence
from .config import (
    ITEM_COUNT,
    MAJOR_NAME_MAX,
    NAME_MAX,
    OPTION_SUFFIXES,
    PASS_VALUE,
    RESPONSE_TIME_MAX_SEC,
    SATISFACTION_MAX,
    SATISFACTION_MIN,
    SUBJECT_MAX,
    USER_ID_MAX,
)
from .errors import InvalidMetadata, MalformedAnswer, ResponseCountMismatch
from .question_bank import LETTERS
from .types import IdentityMeta, Item, ResponseDraft, ValidatedSubmission

GENDERS = ("male", "female", "other", "prefer_not")
EDUCATION_LEVELS = (
    "middle_school", "high_school", "associate", "bachelor", "master", "doctorate",
    "other", "unknown",
    "ibtidai təhsil", "orta təhsil", "tam orta təhsil", "subbakalavr", "bakalavr", "magistr",
)
_OPTION_RX = re.compile(r"^(\d+)([a-z])$", re.I)
_LEADING_NUMBER_RX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_SUBJECT_RX = re.compile(r"^[^\W\d_](?:[^\W\d_]|[\s-])*$")


def _lookup(mapping: Optional[Mapping[Any, Any]], item_id: int) -> Any:
    """Find a per-item value keyed by ``7``, ``"7"`` or ``"Q07"``."""
    if not isinstance(mapping, Mapping):
        return None
    for key in (item_id, str(item_id), f"Q{item_id:02d}"):
        val = mapping.get(key)
        if val is not None:
            return val
    return None


def resolve_position(item: Item, option_id: Any) -> Optional[int]:
    """Return the 1-based chosen position, or None for a skip.

    Skips ("pass", blank, missing) are not errors; the caller defaults them.
    """
    raw = "" if option_id is None else str(option_id).strip()
    if not raw or raw.lower() == PASS_VALUE:
        return None
    m = _OPTION_RX.match(raw)
    if not m or int(m.group(1)) != item.id:
        raise MalformedAnswer(item.question_id, f"Answer option id {raw} does not belong to {item.question_id}")
    suffix = m.group(2).lower()
    pos = OPTION_SUFFIXES.find(suffix) + 1
    if pos < 1 or pos > len(item.options):
        raise MalformedAnswer(item.question_id, f"Invalid option id: {raw}")
    return pos


def response_time(value: Any) -> float:
    """Seconds from a leading number ("12.5s" -> 12.5), clamped to the max."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        num = float(value)
    else:
        m = _LEADING_NUMBER_RX.match(str(value).strip())
        if not m:
            return 0.0
        num = float(m.group(0))
    if not math.isfinite(num) or num < 0:
        return 0.0
    return round(min(num, RESPONSE_TIME_MAX_SEC), 2)


def validate_answers(
    items: Sequence[Item],
    answers: Optional[Mapping[Any, Any]],
    response_times: Optional[Mapping[Any, Any]] = None,
) -> List[ResponseDraft]:
    drafts: List[ResponseDraft] = []
    safe_answers = answers if isinstance(answers, Mapping) else {}
    for item in items:
        pos = resolve_position(item, _lookup(safe_answers, item.id))
        skipped = pos is None
        pos = pos or 1
        code = item.options[pos - 1].code
        if code not in LETTERS:
            raise MalformedAnswer(item.question_id, f"Invalid chosen code for {item.question_id}")
        drafts.append(
            ResponseDraft(
                item_id=item.id,
                question_id=item.question_id,
                options=item.options_str,
                chosen_code=code,
                chosen_position=pos,
                response_time_sec=response_time(_lookup(response_times, item.id)),
                skipped=skipped,
            )
        )
    return drafts


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def assert_user_id(value: Any) -> str:
    uid = "" if value is None else str(value).strip()
    if not uid:
        raise InvalidMetadata("user_id is required")
    if len(uid) > USER_ID_MAX:
        raise InvalidMetadata(f"user_id must be <= {USER_ID_MAX} characters")
    return uid


def assert_gender(value: Any) -> Optional[str]:
    text = _optional_text(value)
    if text is None:
        return None
    norm = text.lower()
    if norm not in GENDERS:
        raise InvalidMetadata(f"gender must be one of: {', '.join(GENDERS)}")
    return norm


def assert_education_level(value: Any) -> Optional[str]:
    text = _optional_text(value)
    if text is None:
        return None
    if text.lower() not in EDUCATION_LEVELS:
        raise InvalidMetadata(f"education_level must be one of: {', '.join(EDUCATION_LEVELS)}")
    return text


def assert_subject(value: Any, field: str) -> Optional[str]:
    text = _optional_text(value)
    if text is None:
        return None
    if len(text) > SUBJECT_MAX:
        raise InvalidMetadata(f"{field} must be <= {SUBJECT_MAX} characters")
    if not _SUBJECT_RX.match(text):
        raise InvalidMetadata(f"{field} must contain only letters, spaces, or hyphen")
    return text


def normalize_meta(raw: Optional[Mapping[str, Any]]) -> IdentityMeta:
    if not raw:
        return IdentityMeta()
    if not isinstance(raw, Mapping):
        raise InvalidMetadata("user metadata must be an object")
    first = _optional_text(raw.get("first_name"))
    last = _optional_text(raw.get("last_name"))
    return IdentityMeta(
        first_name=first[:NAME_MAX] if first else None,
        last_name=last[:NAME_MAX] if last else None,
        gender=assert_gender(raw.get("gender")),
        education_level=assert_education_level(raw.get("education_level")),
        favorite_subject_1=assert_subject(raw.get("favorite_subject_1"), "favorite_subject_1"),
        favorite_subject_2=assert_subject(raw.get("favorite_subject_2"), "favorite_subject_2"),
    )


def validate_submission(
    user_id: Any,
    items: Sequence[Item],
    answers: Optional[Mapping[Any, Any]],
    response_times: Optional[Mapping[Any, Any]] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> ValidatedSubmission:
    """Check a raw answer set once and return the typed submission.

    Every downstream step consumes the result; nothing re-inspects raw JSON.
    """
    uid = assert_user_id(user_id)
    drafts = validate_answers(items, answers, response_times)
    if len(drafts) != ITEM_COUNT:
        raise ResponseCountMismatch(f"Expected {ITEM_COUNT} item responses, catalog produced {len(drafts)}")
    return ValidatedSubmission(user_id=uid, responses=tuple(drafts), meta=normalize_meta(meta))


def assert_satisfaction(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise InvalidMetadata("satisfaction_score must be an integer between 1 and 5")
    try:
        score = int(str(value).strip())
    except ValueError:
        raise InvalidMetadata("satisfaction_score must be an integer between 1 and 5") from None
    if score < SATISFACTION_MIN or score > SATISFACTION_MAX:
        raise InvalidMetadata("satisfaction_score must be an integer between 1 and 5")
    return score


def assert_major_name(value: Any) -> str:
    name = _optional_text(value)
    if name is None:
        raise InvalidMetadata("chosen_major is required")
    return name[:MAJOR_NAME_MAX]
