"""JSON-file store for assessment records, item responses and recommendations.

Each identity owns one document under ``DATA_DIR/users``. A transaction
works on a private copy of that document and writes it back with an atomic
replace only when the block exits cleanly; an exception leaves the file as it
was, which is the rollback. Readers never take the lock: they see either the
previous or the next committed document.
"""

from __future__ import annotations

import copy
import json
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import quote


DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()

_USER_FIELDS = (
    "user_id",
    "first_name",
    "last_name",
    "gender",
    "education_level",
    "favorite_subject_1",
    "favorite_subject_2",
    "scores",
    "riasec_profile",
    "chosen_major",
    "satisfaction_score",
    "created_at",
    "completed_at",
    "confirmed_at",
)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    return json.loads(path.read_text(encoding="utf-8"))


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
    tmp.replace(path)


def _blank_doc() -> Dict[str, Any]:
    return {"user": None, "responses": [], "recommendations": []}


class Transaction:
    """Row-level operations on one identity's document."""

    def __init__(self, user_id: str, doc: Dict[str, Any]) -> None:
        self.user_id = user_id
        self._doc = doc
        self.dirty = False

    # ---- assessment record ----
    def get_user(self) -> Optional[Dict[str, Any]]:
        user = self._doc.get("user")
        return copy.deepcopy(user) if user else None

    def create_user(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if self._doc.get("user"):
            raise ValueError(f"user {self.user_id} already exists")
        row = {k: None for k in _USER_FIELDS}
        row.update({k: v for k, v in record.items() if k in _USER_FIELDS})
        row["user_id"] = self.user_id
        row["created_at"] = row["created_at"] or utcnow_iso()
        self._doc["user"] = row
        self.dirty = True
        return copy.deepcopy(row)

    def update_user(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        user = self._doc.get("user")
        if not user:
            raise ValueError(f"user {self.user_id} not found")
        for k, v in updates.items():
            if k in _USER_FIELDS and k != "user_id":
                user[k] = copy.deepcopy(v)
        self.dirty = True
        return copy.deepcopy(user)

    # ---- item responses ----
    def list_responses(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._doc["responses"])

    def delete_responses(self) -> int:
        removed = len(self._doc["responses"])
        if removed:
            self._doc["responses"] = []
            self.dirty = True
        return removed

    def insert_responses(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        existing = {r["response_id"] for r in self._doc["responses"]}
        created_at = utcnow_iso()
        inserted: List[Dict[str, Any]] = []
        for row in rows:
            rid = row["response_id"]
            if rid in existing:
                raise ValueError(f"duplicate response_id {rid}")
            stored = dict(row, user_id=self.user_id, created_at=created_at)
            self._doc["responses"].append(stored)
            existing.add(rid)
            inserted.append(copy.deepcopy(stored))
        if inserted:
            self.dirty = True
        return inserted

    # ---- recommendations ----
    def list_recommendations(self) -> List[Dict[str, Any]]:
        rows = copy.deepcopy(self._doc["recommendations"])
        rows.sort(key=lambda r: r["recommendation_rank"])
        return rows

    def has_recommendations(self) -> bool:
        return bool(self._doc["recommendations"])

    def delete_recommendations(self) -> int:
        removed = len(self._doc["recommendations"])
        if removed:
            self._doc["recommendations"] = []
            self.dirty = True
        return removed

    def insert_recommendation(self, major_name: str, rank: int, score: float, *, or_ignore: bool = False) -> bool:
        """Insert one row; unique on major name and on rank.

        With ``or_ignore`` a conflict on the major name is a no-op returning
        False instead of an error.
        """
        rows = self._doc["recommendations"]
        if any(r["major_name"] == major_name for r in rows):
            if or_ignore:
                return False
            raise ValueError(f"recommendation for {major_name} already exists")
        if any(r["recommendation_rank"] == rank for r in rows):
            raise ValueError(f"recommendation rank {rank} already taken")
        rows.append(
            {
                "user_id": self.user_id,
                "major_name": major_name,
                "recommendation_rank": int(rank),
                "recommendation_score": float(score),
                "created_at": utcnow_iso(),
            }
        )
        self.dirty = True
        return True

    def next_rank(self) -> int:
        return max((r["recommendation_rank"] for r in self._doc["recommendations"]), default=0) + 1

    def raise_score_floor(self, major_name: str, floor: float) -> Optional[float]:
        for row in self._doc["recommendations"]:
            if row["major_name"] == major_name:
                if row["recommendation_score"] < floor:
                    row["recommendation_score"] = float(floor)
                    self.dirty = True
                return row["recommendation_score"]
        return None


class AssessmentStore:
    def __init__(self, root: Path | str | None = None) -> None:
        self.root = Path(root).resolve() if root is not None else DATA_ROOT
        self.users_dir = self.root / "users"
        self._lock = threading.Lock()

    def _path(self, user_id: str) -> Path:
        return self.users_dir / f"{quote(user_id, safe='')}.json"

    def read(self, user_id: str) -> Dict[str, Any]:
        """Committed document for one identity (blank when never written)."""
        doc = _read_json(self._path(user_id), None)
        return doc if doc is not None else _blank_doc()

    def exists(self, user_id: str) -> bool:
        return self._path(user_id).exists()

    @contextmanager
    def transaction(self, user_id: str) -> Iterator[Transaction]:
        with self._lock:
            tx = Transaction(user_id, copy.deepcopy(self.read(user_id)))
            yield tx
            if tx.dirty:
                _write_json(self._path(user_id), tx._doc)
