from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import OutputKind, SplitRunResult


def serialize_split_result(result: SplitRunResult) -> str:
    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_split_report_json(*, result: SplitRunResult, out_report: Path) -> None:
    out_report.parent.mkdir(parents=True, exist_ok=True)
    out_report.write_text(serialize_split_result(result), encoding="utf-8")


def summarize_split_result(result: SplitRunResult) -> dict[str, Any]:
    """
    One-line summary printed by the CLI.
    """

    return {
        "ok": result.ok,
        "documents": len(result.documents),
        "bundles": sum(len(d.bundles) for d in result.documents),
        "dedicated_outputs": sum(1 for o in result.outputs if o.kind == OutputKind.DEDICATED),
        "mixed_outputs": sum(1 for o in result.outputs if o.kind == OutputKind.MIXED),
        "errors": len(result.errors) + sum(len(d.errors) for d in result.documents),
    }
