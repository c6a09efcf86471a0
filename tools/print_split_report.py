#!/usr/bin/env python3
"""
print_split_report.py

Purpose
- Inspect an order-split run report (the JSON written by `ornament-split --report`).

Features
- Per-document bundle table (label page, slip pages, order id, SKUs).
- Dropped orphan slip pages and warnings/errors per document.
- Global SKU totals, dedicated groups (with units) and mixed section groups.

Usage examples
  python3 tools/print_split_report.py out/split_report.json
  python3 tools/print_split_report.py out/split_report.json --document orders_a
  python3 tools/print_split_report.py out/split_report.json --no-totals

Options
  --document TEXT     Only show documents whose doc_id or relpath contains TEXT
  --no-totals         Skip the global SKU totals table
  --max-skus 6        Max SKUs listed per bundle row
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional


# ----------------------------
# Utilities
# ----------------------------

def _read_json(p: Path) -> Any:
    return json.loads(p.read_text(encoding="utf-8"))


def _truncate(s: str, n: int) -> str:
    if len(s) <= n:
        return s
    return s[: max(0, n - 3)] + "..."


def _pages(label: int, slips: List[int]) -> str:
    # Reports use 0-indexed pages; print 1-indexed like a PDF viewer.
    return f"{label + 1} | " + ",".join(str(i + 1) for i in slips)


def _sku_cell(skus: List[str], counts: Dict[str, int], max_skus: int) -> str:
    parts = [f"{s}x{counts[s]}" if counts.get(s, 1) != 1 else s for s in skus[:max_skus]]
    if len(skus) > max_skus:
        parts.append(f"+{len(skus) - max_skus} more")
    return ", ".join(parts) if parts else "-"


def _issue_lines(items: List[Dict[str, Any]]) -> List[str]:
    out: List[str] = []
    for it in items:
        detail = it.get("detail")
        suffix = f" {json.dumps(detail, sort_keys=True)}" if detail else ""
        out.append(f"    [{it.get('code', '?')}] {it.get('message', '')}{suffix}")
    return out


# ----------------------------
# Sections
# ----------------------------

def render_document(doc: Dict[str, Any], *, max_skus: int) -> List[str]:
    lines: List[str] = []
    status = "ok" if doc.get("ok") else "FAILED"
    lines.append(f"== {doc.get('source_pdf_relpath')}  ({doc.get('doc_id')})  {status}")
    lines.append(f"   pages: {doc.get('page_count', 0)}  bundles: {len(doc.get('bundles') or [])}")

    bundles = doc.get("bundles") or []
    if bundles:
        lines.append(f"   {'#':>3}  {'label | slips':<18} {'order id':<21} skus")
        for n, b in enumerate(bundles, start=1):
            pages = _pages(int(b["label_page_index"]), [int(i) for i in b.get("slip_page_indices", [])])
            lines.append(
                f"   {n:>3}  {_truncate(pages, 18):<18} {b.get('order_id') or '-':<21} "
                f"{_sku_cell(b.get('skus') or [], b.get('sku_counts') or {}, max_skus)}"
            )

    dropped = doc.get("dropped_page_indices") or []
    if dropped:
        lines.append("   dropped pages: " + ",".join(str(i + 1) for i in dropped))

    warnings = (doc.get("meta") or {}).get("warnings") or []
    if warnings:
        lines.append("   warnings:")
        lines.extend(_issue_lines(warnings))

    errors = doc.get("errors") or []
    if errors:
        lines.append("   errors:")
        lines.extend(_issue_lines(errors))
    return lines


def render_routing(routing: Optional[Dict[str, Any]], *, show_totals: bool) -> List[str]:
    if routing is None:
        return ["== routing: none"]

    lines: List[str] = []
    totals = routing.get("global_totals") or {}
    if show_totals and totals:
        lines.append("== global totals")
        width = max(len(k) for k in totals)
        for sku, units in sorted(totals.items(), key=lambda kv: (-int(kv[1]), kv[0])):
            lines.append(f"   {sku:<{width}}  {units}")

    dedicated = routing.get("dedicated") or []
    lines.append(f"== dedicated groups: {len(dedicated)}")
    for g in dedicated:
        lines.append(f"   {g['sku']}: {g['total_units']} units, {len(g.get('bundles') or [])} bundles")

    mixed = routing.get("mixed") or []
    lines.append(f"== mixed groups: {len(mixed)}")
    for g in mixed:
        lines.append(f"   {g['section']}: {len(g.get('bundles') or [])} bundles")
    return lines


def render_outputs(outputs: List[Dict[str, Any]]) -> List[str]:
    if not outputs:
        return []
    lines = [f"== outputs: {len(outputs)}"]
    for o in outputs:
        units = "" if o.get("units") is None else f" units={o['units']}"
        lines.append(f"   {o['relpath']}  [{o['kind']}] bundles={o['bundle_count']} pages={o['page_count']}{units}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Terminal summary of an ornament order split report.")
    ap.add_argument("input", type=str, help="Path to the split report JSON.")
    ap.add_argument("--document", type=str, default=None, help="Only show documents matching this text.")
    ap.add_argument("--no-totals", action="store_true", default=False, help="Skip the global SKU totals table.")
    ap.add_argument("--max-skus", type=int, default=6, help="Max SKUs listed per bundle row.")
    args = ap.parse_args(argv)

    input_path = Path(args.input)
    payload = _read_json(input_path)
    if not isinstance(payload, dict) or "documents" not in payload:
        print(f"Not a split report: {input_path}")
        return 2

    docs = payload.get("documents") or []
    if args.document is not None:
        needle = args.document
        docs = [d for d in docs if needle in str(d.get("doc_id", "")) or needle in str(d.get("source_pdf_relpath", ""))]
        if not docs:
            print(f"No document matching {needle!r} in report.")
            return 2

    meta = payload.get("meta") or {}
    print(f"Input: {input_path}")
    print(
        f"ok: {payload.get('ok')}  policy: {meta.get('policy_name', '?')}  "
        f"dry run: {meta.get('dry_run', False)}  documents: {len(docs)}"
    )

    for doc in docs:
        for line in render_document(doc, max_skus=max(1, args.max_skus)):
            print(line)

    if args.document is None:
        for line in render_routing(payload.get("routing"), show_totals=not args.no_totals):
            print(line)
        for line in render_outputs(payload.get("outputs") or []):
            print(line)

    run_errors = payload.get("errors") or []
    if run_errors:
        print("== run errors")
        for line in _issue_lines(run_errors):
            print(line)

    return 0 if payload.get("ok") else 1


if __name__ == "__main__":
    raise SystemExit(main())
