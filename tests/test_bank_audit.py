from __future__ import annotations

from pathlib import Path

import riasec_core.audit_bank as audit_bank
from riasec_core.question_bank import build_items, load_catalog, load_items
from riasec_core.types import Candidate


def test_shipped_bank_and_catalog_are_clean():
    items_summary = audit_bank.audit_items(load_items())
    catalog_summary = audit_bank.audit_catalog(load_catalog())

    assert items_summary["warnings"] == []
    assert catalog_summary["warnings"] == []
    assert sum(items_summary["coverage"].values()) == 90
    assert all(count > 0 for count in catalog_summary["lead_letters"].values())


def test_audit_flags_bad_items(tmp_path):
    matrix = [("R", "R", "I"), ("S", "E", "X")] + [("R", "I", "A")] * 3
    summary = audit_bank.audit_items(build_items(matrix))

    joined = "\n".join(summary["warnings"])
    assert "item bank has 5 items" in joined
    assert "Q01 repeats a trait letter" in joined
    assert "Q02 uses unknown trait letter 'X'" in joined
    assert "trait C is never offered" in joined

    outfile = tmp_path / "catalog_audit.json"
    text = audit_bank.write_summary(summary, path=outfile)
    assert outfile.read_text(encoding="utf-8").strip() == text


def test_audit_flags_bad_catalog():
    catalog = [
        Candidate("Physics", ("I", "R")),
        Candidate("Physics", ("I", "A")),
        Candidate("Oddity", ("Q",)),
        Candidate("Echo", ("S", "S")),
    ]
    summary = audit_bank.audit_catalog(catalog)

    joined = "\n".join(summary["warnings"])
    assert "'Physics' is listed more than once" in joined
    assert "Oddity uses unknown trait letters Q" in joined
    assert "Echo repeats a trait letter" in joined
    assert "no major leads with trait R" in joined
    assert summary["lead_letters"]["I"] == 2


def test_main_returns_warning_exit(monkeypatch, capsys):
    monkeypatch.setattr(audit_bank, "load_catalog", lambda: [Candidate("Solo", ("R",))])

    exit_code = audit_bank.main([])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Major Catalog" in captured.out
    assert "no major leads with trait I" in captured.out
    assert Path("/tmp/catalog_audit.json").exists()
