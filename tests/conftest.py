from __future__ import annotations

import pytest

from riasec_core.engine import AssessmentService
from riasec_core.question_bank import load_items
from riasec_core.storage import AssessmentStore
from riasec_core.types import Candidate, Item


def build_answers(items: list[Item] | None = None, *, letter: str | None = None, position: int = 1) -> dict[str, str]:
    """Answer map keyed by item id.

    With ``letter`` every item picks the option carrying that trait where one
    exists; other items (and every item without ``letter``) pick ``position``.
    """

    answers: dict[str, str] = {}
    for item in items or load_items():
        chosen = item.options[position - 1]
        if letter is not None:
            chosen = next((o for o in item.options if o.code == letter), chosen)
        answers[str(item.id)] = chosen.id
    return answers


def build_catalog() -> list[Candidate]:
    """Small deterministic catalog covering each leading letter."""

    return [
        Candidate(name="Mechanical Engineering", codes=("R", "I", "C")),
        Candidate(name="Civil Engineering", codes=("R", "I", "C")),
        Candidate(name="Physics", codes=("I", "R", "A")),
        Candidate(name="Fine Arts", codes=("A", "S", "E")),
        Candidate(name="Psychology", codes=("S", "I", "A")),
        Candidate(name="Business Administration", codes=("E", "C", "S")),
        Candidate(name="Accounting", codes=("C", "E", "I")),
        Candidate(name="Journalism", codes=("A", "E", "S")),
        Candidate(name="Nursing", codes=("S", "I", "R")),
        Candidate(name="Law", codes=("E", "S", "I")),
        Candidate(name="Architecture", codes=("A", "R", "I")),
        Candidate(name="Statistics", codes=("C", "I", "R")),
    ]


@pytest.fixture
def items() -> list[Item]:
    return load_items()


@pytest.fixture
def catalog() -> list[Candidate]:
    return build_catalog()


@pytest.fixture
def store(tmp_path) -> AssessmentStore:
    return AssessmentStore(tmp_path)


@pytest.fixture
def service(store, catalog) -> AssessmentService:
    return AssessmentService(store, catalog=catalog)
