"""Helpers to export stored item responses in JSON/CSV formats."""
from __future__ import annotations

from typing import Iterable, List, Dict, Any
import csv
import io

_FIELDS: tuple[str, ...] = (
    "response_id",
    "user_id",
    "question_id",
    "options",
    "chosen_code",
    "chosen_position",
    "response_time_sec",
    "created_at",
)


def _normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in _FIELDS:
        val = row.get(key)
        if key == "chosen_position":
            try:
                out[key] = int(val)
            except (TypeError, ValueError):
                out[key] = 0
        elif key == "response_time_sec":
            try:
                out[key] = round(float(val), 2)
            except (TypeError, ValueError):
                out[key] = 0.0
        else:
            out[key] = "" if val is None else str(val)
    return out


def to_json(rows: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    normalized: List[Dict[str, Any]] = [_normalize_row(r or {}) for r in rows]
    return {"total": len(normalized), "responses": normalized}


def to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    """Render responses as CSV with a fixed header, one row per item."""

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for row in rows:
        writer.writerow(_normalize_row(row or {}))
    return buf.getvalue()


__all__ = ["to_json", "to_csv"]
