from __future__ import annotations

import asyncio
import json

import autoplay
from riasec_core.question_bank import load_items


def test_letter_profile_prefers_that_letter():
    answers = autoplay.build_answers(load_items(), "all-C")
    items = {str(it.id): it for it in load_items()}
    for key, option_id in answers.items():
        codes = {o.id: o.code for o in items[key].options}
        if "C" in items[key].codes:
            assert codes[option_id] == "C"
        else:
            assert option_id.endswith("a")


def test_random_profile_is_seeded():
    items = load_items()
    assert autoplay.build_answers(items, "random", 7) == autoplay.build_answers(items, "random", 7)
    assert set(autoplay.build_answers(items, "pass").values()) == {"pass"}


def test_run_submits_and_confirms(tmp_path):
    out = asyncio.run(autoplay.run("all-S", "auto-1", 1, 4, str(tmp_path)))
    assert out["profile"][0] == "S"
    assert out["confirmed"]["major"] == out["recommendations"][0]["major_name"]
    assert (tmp_path / "users" / "auto-1.json").exists()


def test_main_prints_json(tmp_path, capsys):
    assert autoplay.main(["--profile", "pass", "--user", "auto-2", "--data-dir", str(tmp_path)]) == 0
    body = json.loads(capsys.readouterr().out)
    assert body["user_id"] == "auto-2"
    assert sum(body["scores"].values()) == 30
