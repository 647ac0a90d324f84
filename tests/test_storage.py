from __future__ import annotations

import json

import pytest

from riasec_core.storage import AssessmentStore


def _seed(store: AssessmentStore, user_id: str = "u1") -> None:
    with store.transaction(user_id) as tx:
        tx.create_user({"first_name": "Ann", "last_name": "Lee"})
        tx.insert_recommendation("Physics", 1, 1.5)
        tx.insert_recommendation("Law", 2, 0.5)


def test_commit_writes_document(store):
    _seed(store)
    doc = store.read("u1")
    assert doc["user"]["first_name"] == "Ann"
    assert doc["user"]["chosen_major"] is None
    assert doc["user"]["created_at"]
    assert [r["major_name"] for r in doc["recommendations"]] == ["Physics", "Law"]


def test_exception_rolls_back_every_change(store):
    _seed(store)
    before = store._path("u1").read_text(encoding="utf-8")

    with pytest.raises(RuntimeError):
        with store.transaction("u1") as tx:
            tx.update_user({"chosen_major": "Physics"})
            tx.delete_recommendations()
            raise RuntimeError("abort")

    assert store._path("u1").read_text(encoding="utf-8") == before


def test_clean_read_only_transaction_writes_nothing(store):
    with store.transaction("nobody") as tx:
        assert tx.get_user() is None
        assert not tx.has_recommendations()
    assert not store.exists("nobody")
    assert store.read("nobody") == {"user": None, "responses": [], "recommendations": []}


def test_recommendations_are_unique_on_name_and_rank(store):
    _seed(store)
    with pytest.raises(ValueError):
        with store.transaction("u1") as tx:
            tx.insert_recommendation("Physics", 3, 0.1)
    with pytest.raises(ValueError):
        with store.transaction("u1") as tx:
            tx.insert_recommendation("Nursing", 1, 0.1)

    with store.transaction("u1") as tx:
        assert tx.insert_recommendation("Physics", tx.next_rank(), 0.0, or_ignore=True) is False
        assert tx.insert_recommendation("Nursing", tx.next_rank(), 0.0, or_ignore=True) is True
    assert [r["recommendation_rank"] for r in store.read("u1")["recommendations"]] == [1, 2, 3]


def test_duplicate_response_id_is_rejected(store):
    row = {"response_id": "u1_Q01", "question_id": "Q01", "chosen_code": "R"}
    with pytest.raises(ValueError):
        with store.transaction("u1") as tx:
            tx.create_user({})
            tx.insert_responses([row, dict(row)])
    assert not store.exists("u1")


def test_raise_score_floor_only_raises(store):
    _seed(store)
    with store.transaction("u1") as tx:
        assert tx.raise_score_floor("Physics", 1.0) == 1.5
        assert tx.raise_score_floor("Law", 3.0) == 3.0
        assert tx.raise_score_floor("Missing", 3.0) is None
    rows = {r["major_name"]: r["recommendation_score"] for r in store.read("u1")["recommendations"]}
    assert rows == {"Physics": 1.5, "Law": 3.0}


def test_user_ids_are_quoted_into_file_names(store):
    _seed(store, "a/b c")
    files = list(store.users_dir.iterdir())
    assert len(files) == 1
    assert files[0].name == "a%2Fb%20c.json"
    assert json.loads(files[0].read_text(encoding="utf-8"))["user"]["user_id"] == "a/b c"
