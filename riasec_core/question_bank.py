
from __future__ import annotations
import json, importlib.resources as ir
from typing import List, Tuple
from .config import OPTION_SUFFIXES
from .types import Candidate, Item, ItemOption
LETTERS: Tuple[str, ...] = ("R", "I", "A", "S", "E", "C")
LETTER_NAMES = {
    "R": "Realistic", "I": "Investigative", "A": "Artistic",
    "S": "Social", "E": "Enterprising", "C": "Conventional",
}
PROMPTS = [
    "Which scene looks most energizing to you?",
    "Which activity would you volunteer for first?",
    "Which project would you confidently lead?",
    "Which situation best reflects your natural strengths?",
    "Which environment would you happily spend an afternoon in?",
    "Which challenge feels most aligned with you right now?",
]
CATEGORY_MATRIX: Tuple[Tuple[str, str, str], ...] = (
    ("R","I","A"), ("S","E","C"), ("R","S","E"), ("I","A","C"), ("R","E","C"),
    ("I","S","A"), ("R","A","S"), ("I","C","E"), ("R","I","C"), ("A","S","E"),
    ("R","S","C"), ("I","A","E"), ("R","A","E"), ("I","S","C"), ("R","I","S"),
    ("A","E","C"), ("R","C","A"), ("I","E","S"), ("R","E","A"), ("I","C","S"),
    ("R","S","A"), ("I","E","C"), ("R","A","I"), ("S","C","E"), ("R","C","S"),
    ("I","A","S"), ("R","E","I"), ("A","C","E"), ("R","S","I"), ("A","E","C"),
)
def build_items(matrix=CATEGORY_MATRIX) -> List[Item]:
    items: List[Item] = []
    for idx, row in enumerate(matrix):
        item_id = idx + 1
        options = tuple(
            ItemOption(
                id=f"{item_id}{OPTION_SUFFIXES[pos]}",
                position=pos + 1,
                code=code,
                description=f"Represents {LETTER_NAMES.get(code, code)} type",
            )
            for pos, code in enumerate(row)
        )
        items.append(Item(id=item_id, prompt=f"{PROMPTS[idx % len(PROMPTS)]} (Item {item_id})", options=options))
    return items
def load_items() -> List[Item]:
    return build_items()
def load_catalog() -> Tuple[Candidate, ...]:
    data = ir.files(__package__).joinpath("data/majors.json").read_text(encoding="utf-8")
    raw = json.loads(data)
    out: List[Candidate] = []
    for r in raw:
        name = str(r.get("major") or "").strip()
        codes = tuple(ch.upper() for ch in str(r.get("codes") or "").strip() if not ch.isspace())
        if name and codes:
            out.append(Candidate(name=name, codes=codes))
    return tuple(out)
