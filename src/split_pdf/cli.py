from __future__ import annotations

import argparse
import json
from pathlib import Path

from bundling.config import BundlingPolicy
from routing.config import RoutingConfig

from .artifacts import summarize_split_result, write_split_report_json
from .contracts import PdfEngineName, SplitConfig
from .logging_setup import setup_logging
from .module import run_split_orders


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ornament-split",
        description="Split ornament order PDFs into label+slip bundles and merge them per SKU / per section.",
    )
    p.add_argument("--data-root", required=True, type=Path, help="Resolved DATA_ROOT path.")
    p.add_argument(
        "--pdf-relpath",
        required=True,
        action="append",
        dest="pdf_relpaths",
        help="PDF path relative to --data-root. Repeat for several documents.",
    )
    p.add_argument("--out-root", required=True, type=Path, help="Explicit output root directory.")
    p.add_argument("--report", type=Path, default=None, help="Optional run report JSON file.")
    p.add_argument(
        "--sections-csv",
        type=Path,
        default=None,
        help="SKU,Section CSV. Default: the packaged section table.",
    )
    p.add_argument(
        "--engine",
        choices=[e.value for e in PdfEngineName],
        default=PdfEngineName.PYPDFIUM2.value,
        help="PDF backend.",
    )
    p.add_argument(
        "--packing-slip-aware",
        action="store_true",
        help='Also treat pages mentioning "packing slip" as slip pages.',
    )
    p.add_argument(
        "--occurrence-quantities",
        action="store_true",
        help="Estimate units per SKU occurrence (Qty fields, repeats) instead of one per bundle.",
    )
    p.add_argument(
        "--min-units",
        type=int,
        default=RoutingConfig().min_units_for_dedicated,
        help="Global units at which a SKU gets its own output file.",
    )
    p.add_argument("--dry-run", action="store_true", help="Bundle and route only; write nothing but the report.")
    p.add_argument("--no-summary-pages", action="store_true", help="Do not append summary pages to outputs.")
    p.add_argument(
        "--compute-source-sha256",
        action="store_true",
        help="Include SHA-256 of each source PDF in the report for auditing.",
    )
    p.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Console log level.",
    )
    p.add_argument("--debug-log", type=Path, default=None, help="Write a full DEBUG trace to this file.")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level, args.debug_log)

    config = SplitConfig(
        data_root=args.data_root,
        out_root=args.out_root,
        engine=PdfEngineName(args.engine),
        policy=BundlingPolicy(
            use_generic_slip_keyword=args.packing_slip_aware,
            use_occurrence_quantities=args.occurrence_quantities,
        ),
        routing=RoutingConfig(min_units_for_dedicated=args.min_units),
        sections_csv=args.sections_csv,
        write_outputs=not args.dry_run,
        summary_pages=not args.no_summary_pages,
        compute_source_sha256=args.compute_source_sha256,
    )

    result = run_split_orders(config=config, pdf_relpaths=args.pdf_relpaths)
    if args.report is not None:
        write_split_report_json(result=result, out_report=args.report)

    print(json.dumps(summarize_split_result(result), sort_keys=True))
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
