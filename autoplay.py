# autoplay.py
from __future__ import annotations
import argparse, asyncio, datetime, json, logging, random
from typing import Dict, List, Optional
from riasec_core.config import LOG_LEVEL, PASS_VALUE
from riasec_core.engine import AssessmentService
from riasec_core.question_bank import LETTERS
from riasec_core.storage import AssessmentStore
from riasec_core.types import Item

PROFILES = [f"all-{letter}" for letter in LETTERS] + ["random", "pass", "first"]

def _new_user_id(profile: str) -> str:
    return datetime.datetime.now().strftime(f"auto_{profile}_%Y%m%d_%H%M%S")

def _answer_for(item: Item, profile: str, rng: random.Random) -> str:
    if profile == "pass":
        return PASS_VALUE
    if profile == "random":
        return rng.choice(item.options).id
    if profile.startswith("all-"):
        # prefer the target letter; otherwise fall back to the first option
        target = profile[4:]
        for opt in item.options:
            if opt.code == target: return opt.id
    return item.options[0].id

def build_answers(items: List[Item], profile: str, seed: Optional[int] = None) -> Dict[str, str]:
    rng = random.Random(seed if seed is not None else 1234)
    return {str(it.id): _answer_for(it, profile, rng) for it in items}

async def run(profile: str, user_id: str, seed: Optional[int], confirm: Optional[int], data_dir: Optional[str]):
    service = AssessmentService(AssessmentStore(data_dir))
    answers = build_answers(list(service.items), profile, seed)
    times = {k: round(1.0 + (i % 5) * 0.4, 2) for i, k in enumerate(answers)}
    res = await service.submit(user_id, answers, times, {"first_name": "Auto", "last_name": profile})
    out = {
        "user_id": user_id,
        "profile": res.user.get("riasec_profile"),
        "scores": res.user.get("scores"),
        "recommendations": res.recommendations,
    }
    if confirm is not None and res.recommendations:
        top = res.recommendations[0]["major_name"]
        conf = await service.confirm(user_id, top, confirm)
        out["confirmed"] = {"major": conf.chosen_major, "satisfaction_score": conf.satisfaction_score}
    return out

def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--profile", choices=PROFILES, default="all-R")
    ap.add_argument("--user", default=None)
    ap.add_argument("--seed", type=int, default=1337)
    ap.add_argument("--confirm", type=int, default=None, help="confirm the top major with this 1-5 rating")
    ap.add_argument("--data-dir", default=None)
    a = ap.parse_args(argv)
    logging.basicConfig(level=LOG_LEVEL, format="[%(levelname)s] %(message)s")
    out = asyncio.run(run(a.profile, a.user or _new_user_id(a.profile), a.seed, a.confirm, a.data_dir))
    print(json.dumps(out, indent=2, ensure_ascii=False))
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
