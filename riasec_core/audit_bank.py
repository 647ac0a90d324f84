from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from . import config
from .question_bank import LETTERS, load_catalog, load_items
from .types import Candidate, Item

log = logging.getLogger(__name__)


def audit_items(items: Iterable[Item]) -> dict[str, object]:
    items = list(items)
    coverage = {letter: 0 for letter in LETTERS}
    warnings: list[str] = []

    if len(items) != config.ITEM_COUNT:
        warnings.append(f"item bank has {len(items)} items (expected {config.ITEM_COUNT})")

    seen_ids: set[int] = set()
    for item in items:
        if item.id in seen_ids:
            warnings.append(f"{item.question_id} appears more than once")
        seen_ids.add(item.id)

        codes = item.codes
        if len(codes) != config.OPTIONS_PER_ITEM:
            warnings.append(f"{item.question_id} has {len(codes)} options (expected {config.OPTIONS_PER_ITEM})")
        if len(set(codes)) != len(codes):
            warnings.append(f"{item.question_id} repeats a trait letter: {item.options_str}")
        for code in codes:
            if code in coverage:
                coverage[code] += 1
            else:
                warnings.append(f"{item.question_id} uses unknown trait letter {code!r}")
        for pos, opt in enumerate(item.options, start=1):
            if opt.position != pos:
                warnings.append(f"{item.question_id} option {opt.id} sits at position {opt.position}, expected {pos}")

    for letter, count in coverage.items():
        if count == 0:
            warnings.append(f"trait {letter} is never offered")

    return {"coverage": coverage, "warnings": warnings, "totals": {"items": len(items)}}


def audit_catalog(catalog: Iterable[Candidate]) -> dict[str, object]:
    catalog = list(catalog)
    lead = {letter: 0 for letter in LETTERS}
    warnings: list[str] = []
    names: set[str] = set()

    for cand in catalog:
        if cand.name in names:
            warnings.append(f"major {cand.name!r} is listed more than once")
        names.add(cand.name)

        codes = list(cand.codes)
        if not 1 <= len(codes) <= config.PROFILE_LENGTH:
            warnings.append(f"{cand.name} has {len(codes)} trait letters (expected 1..{config.PROFILE_LENGTH})")
        bad = [c for c in codes if c not in LETTERS]
        if bad:
            warnings.append(f"{cand.name} uses unknown trait letters {''.join(bad)}")
        if len(set(codes)) != len(codes):
            warnings.append(f"{cand.name} repeats a trait letter: {''.join(codes)}")
        if codes and codes[0] in lead:
            lead[codes[0]] += 1

    for letter, count in lead.items():
        if count == 0:
            warnings.append(f"no major leads with trait {letter}")

    return {"lead_letters": lead, "warnings": warnings, "totals": {"majors": len(catalog)}}


def print_report(items_summary: dict[str, object], catalog_summary: dict[str, object]) -> None:
    print("=== Item Bank ===")
    coverage: dict[str, int] = items_summary["coverage"]  # type: ignore[assignment]
    print("  " + "  ".join(f"{letter}:{coverage[letter]:3d}" for letter in LETTERS))
    print("\n=== Major Catalog (leading letter) ===")
    lead: dict[str, int] = catalog_summary["lead_letters"]  # type: ignore[assignment]
    print("  " + "  ".join(f"{letter}:{lead[letter]:3d}" for letter in LETTERS))

    warnings = list(items_summary["warnings"]) + list(catalog_summary["warnings"])  # type: ignore[arg-type]
    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")
    print("\nTotals:", {**items_summary["totals"], **catalog_summary["totals"]})  # type: ignore[dict-item]


def write_summary(summary: dict[str, object], path: Path = Path("/tmp/catalog_audit.json")) -> str:
    text = json.dumps(summary, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
    return text


def main(_argv: list[str] | None = None) -> int:
    logging.basicConfig(level=config.LOG_LEVEL, format="[%(levelname)s] %(message)s")
    items_summary = audit_items(load_items())
    catalog_summary = audit_catalog(load_catalog())
    print_report(items_summary, catalog_summary)
    text = write_summary({"items": items_summary, "catalog": catalog_summary})
    log.info("audit summary written (%d chars)", len(text))
    return 2 if items_summary["warnings"] or catalog_summary["warnings"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
