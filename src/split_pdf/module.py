from __future__ import annotations

import hashlib
import json
import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from bundling.assembler import assemble_bundles
from bundling.config import BundlingPolicy
from contracts.bundles import Bundle, RoutingResult
from contracts.pages import PageText
from routing.engine import RoutingEngine
from routing.sections import SectionTable
from sku.patterns import PATTERNS_VERSION

from .contracts import (
    DocumentReport,
    OutputFile,
    OutputKind,
    PdfEngineName,
    SplitConfig,
    SplitError,
    SplitRunResult,
)
from .data_access import DataAccessError, resolve_under_data_root, sha256_file
from .engines import PdfEngine, Pypdfium2Engine
from .summary import SummaryPage

logger = logging.getLogger(__name__)

TMP_PAGES_DIRNAME = "_tmp_pages"
MIX_DIRNAME = "mix"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _safe_pdf_stem(pdf_relpath: str) -> str:
    """
    Deterministic, filesystem-safe stem for readability.
    """
    s = pdf_relpath.replace("\\", "/").split("/")[-1]
    if s.lower().endswith(".pdf"):
        s = s[: -len(".pdf")]
    s = re.sub(r"[^A-Za-z0-9._-]+", "_", s)
    s = re.sub(r"_+", "_", s).strip("_")
    return s or "pdf"


def _compute_doc_id(*, source_pdf_relpath: str, policy: BundlingPolicy, backend_id: str) -> str:
    """
    Deterministic doc_id, stable for identical:
    (source_pdf_relpath + bundling policy + backend identifier).
    """

    payload = {
        "source_pdf_relpath": source_pdf_relpath.replace("\\", "/"),
        "policy": policy.to_dict(),
        "backend": backend_id,
    }
    s = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(s.encode("utf-8")).hexdigest()
    return f"{_safe_pdf_stem(source_pdf_relpath)}_{digest[:12]}"


def sanitize_filename(label: str) -> str:
    s = _UNSAFE_FILENAME_CHARS.sub("_", label.strip())
    return s or "unnamed"


def _unique_path(directory: Path, stem: str, suffix: str, taken: set[str]) -> Path:
    candidate = directory / f"{stem}{suffix}"
    n = 0
    while str(candidate).lower() in taken:
        n += 1
        candidate = directory / f"{stem}_{n}{suffix}"
    taken.add(str(candidate).lower())
    return candidate


def _get_engine(engine: PdfEngineName) -> PdfEngine:
    if engine == PdfEngineName.PYPDFIUM2:
        return Pypdfium2Engine()
    raise ValueError(f"Unsupported PDF engine: {engine}")


def _load_sections(config: SplitConfig) -> SectionTable:
    if config.sections_csv is None:
        return SectionTable.default()
    return SectionTable.from_csv(config.sections_csv.expanduser())


def _warning(code: str, message: str, detail: dict[str, Any]) -> dict[str, Any]:
    return {"code": code, "message": message, "detail": detail}


def _sorted_warnings(warnings: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(warnings, key=lambda w: (w["code"], json.dumps(w["detail"], sort_keys=True)))


def _failed_document(
    *, doc_id: str, pdf_relpath: str, code: str, message: str, detail: dict[str, Any], page_count: int = 0
) -> DocumentReport:
    logger.warning("document %s failed: %s (%s)", pdf_relpath, code, message)
    return DocumentReport(
        doc_id=doc_id,
        ok=False,
        source_pdf_relpath=pdf_relpath,
        page_count=page_count,
        bundles=[],
        dropped_page_indices=[],
        errors=[SplitError(code=code, message=message, detail=detail)],
        meta={"warnings": []},
    )


def _process_document(
    *, config: SplitConfig, engine: PdfEngine, pdf_relpath: str, tmp_root: Path
) -> tuple[DocumentReport, list[Path]]:
    """
    Read, bundle and (unless dry run) split one input document.

    Returns the report and the single-page files, index i holding page i.
    """

    doc_id = _compute_doc_id(source_pdf_relpath=pdf_relpath, policy=config.policy, backend_id=engine.backend_id())

    if not pdf_relpath.lower().endswith(".pdf"):
        return (
            _failed_document(
                doc_id=doc_id,
                pdf_relpath=pdf_relpath,
                code="SPLIT_INPUT_NOT_PDF",
                message="Only PDFs are accepted (by .pdf extension)",
                detail={"pdf_relpath": pdf_relpath},
            ),
            [],
        )

    try:
        pdf_file = resolve_under_data_root(data_root=config.data_root, relpath=pdf_relpath)
    except DataAccessError as e:
        return (
            _failed_document(
                doc_id=doc_id,
                pdf_relpath=pdf_relpath,
                code="SPLIT_DATA_ACCESS_ERROR",
                message=str(e),
                detail={"data_root": str(config.data_root), "relpath": pdf_relpath},
            ),
            [],
        )

    if not pdf_file.is_file():
        return (
            _failed_document(
                doc_id=doc_id,
                pdf_relpath=pdf_relpath,
                code="SPLIT_INPUT_NOT_FOUND",
                message="Input PDF not found",
                detail={"source_pdf_relpath": pdf_relpath},
            ),
            [],
        )

    try:
        page_count = engine.get_page_count(pdf_file=pdf_file)
        texts = engine.extract_page_texts(pdf_file=pdf_file)
    except Exception as e:
        return (
            _failed_document(
                doc_id=doc_id,
                pdf_relpath=pdf_relpath,
                code="SPLIT_BACKEND_TEXT_FAILED",
                message="Failed to extract page text",
                detail={"error": repr(e)},
            ),
            [],
        )

    if len(texts) != page_count:
        return (
            _failed_document(
                doc_id=doc_id,
                pdf_relpath=pdf_relpath,
                code="SPLIT_PAGE_COUNT_MISMATCH",
                message="Extracted text page count differs from document page count",
                detail={"page_count": page_count, "text_pages": len(texts)},
                page_count=page_count,
            ),
            [],
        )

    pages = [PageText.from_raw(i, t) for i, t in enumerate(texts)]
    for p in pages:
        logger.debug("%s page %s text:\n%s", doc_id, p.index, p.raw_text)

    assembly = assemble_bundles(doc_id, pages, policy=config.policy)

    page_files: list[Path] = []
    if config.write_outputs:
        try:
            page_files = engine.split_to_single_pages(pdf_file=pdf_file, out_dir=tmp_root / doc_id)
        except Exception as e:
            return (
                _failed_document(
                    doc_id=doc_id,
                    pdf_relpath=pdf_relpath,
                    code="SPLIT_BACKEND_SPLIT_FAILED",
                    message="Failed to split PDF into single pages",
                    detail={"error": repr(e)},
                    page_count=len(pages),
                ),
                [],
            )
        if len(page_files) != len(pages):
            return (
                _failed_document(
                    doc_id=doc_id,
                    pdf_relpath=pdf_relpath,
                    code="SPLIT_PAGE_COUNT_MISMATCH",
                    message="Split page count differs from extracted text page count",
                    detail={"text_pages": len(pages), "split_pages": len(page_files)},
                    page_count=len(pages),
                ),
                [],
            )

    warnings = [
        _warning(
            "ORPHAN_SLIP_PAGE",
            "Slip page has no preceding label page and was dropped",
            {"page_index": i},
        )
        for i in assembly.dropped_page_indices
    ]

    meta: dict[str, Any] = {}
    if config.compute_source_sha256:
        try:
            meta["source_sha256"] = sha256_file(pdf_file)
        except OSError as e:
            warnings.append(_warning("SPLIT_SOURCE_HASH_FAILED", "Failed to hash source PDF", {"error": repr(e)}))
    meta["warnings"] = _sorted_warnings(warnings)

    logger.info(
        "%s: %s pages, %s bundles, %s dropped",
        pdf_relpath,
        len(pages),
        len(assembly.bundles),
        len(assembly.dropped_page_indices),
    )
    report = DocumentReport(
        doc_id=doc_id,
        ok=True,
        source_pdf_relpath=pdf_relpath,
        page_count=len(pages),
        bundles=list(assembly.bundles),
        dropped_page_indices=list(assembly.dropped_page_indices),
        errors=[],
        meta=meta,
    )
    return report, page_files


@dataclass(frozen=True, slots=True)
class _PlannedOutput:
    output: OutputFile
    out_file: Path
    bundles: tuple[Bundle, ...]
    summary: SummaryPage | None


def _plan_outputs(*, config: SplitConfig, routing: RoutingResult, out_root: Path) -> list[_PlannedOutput]:
    taken: set[str] = set()
    planned: list[_PlannedOutput] = []

    for g in routing.dedicated:
        out_file = _unique_path(out_root, f"x{g.total_units}-{sanitize_filename(g.sku)}", ".pdf", taken)
        planned.append(
            _PlannedOutput(
                output=OutputFile(
                    relpath=out_file.relative_to(out_root).as_posix(),
                    kind=OutputKind.DEDICATED,
                    label=g.sku,
                    units=g.total_units,
                    bundle_count=len(g.bundles),
                    page_count=sum(len(b.page_indices) for b in g.bundles),
                ),
                out_file=out_file,
                bundles=g.bundles,
                summary=SummaryPage.for_dedicated(g.sku, g.total_units) if config.summary_pages else None,
            )
        )

    mix_dir = out_root / MIX_DIRNAME
    for g in routing.mixed:
        out_file = _unique_path(mix_dir, sanitize_filename(g.section), ".pdf", taken)
        planned.append(
            _PlannedOutput(
                output=OutputFile(
                    relpath=out_file.relative_to(out_root).as_posix(),
                    kind=OutputKind.MIXED,
                    label=g.section,
                    units=None,
                    bundle_count=len(g.bundles),
                    page_count=sum(len(b.page_indices) for b in g.bundles),
                ),
                out_file=out_file,
                bundles=g.bundles,
                summary=SummaryPage.for_mixed(out_file.stem) if config.summary_pages else None,
            )
        )

    return planned


def run_split_orders(*, config: SplitConfig, pdf_relpaths: list[str]) -> SplitRunResult:
    """
    Programmatic entrypoint.

    Input: PDF relpaths under `config.data_root`
    Output: merged per-SKU / per-section PDFs under `config.out_root` + JSON-ready run result
    """

    engine = _get_engine(config.engine)
    meta: dict[str, Any] = {
        "backend": engine.backend_id(),
        "backend_version": engine.backend_version(),
        "dry_run": not config.write_outputs,
        "patterns_version": PATTERNS_VERSION,
        "policy": config.policy.to_dict(),
        "policy_name": config.policy.name,
        "routing": config.routing.to_dict(),
        "sections_source": "packaged" if config.sections_csv is None else str(config.sections_csv),
        "summary_pages": config.summary_pages,
    }

    def failed_run(code: str, message: str, detail: dict[str, Any]) -> SplitRunResult:
        logger.error("split run failed: %s (%s)", code, message)
        return SplitRunResult(
            ok=False,
            engine=config.engine,
            documents=[],
            routing=None,
            outputs=[],
            errors=[SplitError(code=code, message=message, detail=detail)],
            meta=meta,
        )

    if not pdf_relpaths:
        return failed_run("SPLIT_NO_INPUTS", "At least one PDF relpath is required", {})

    try:
        sections = _load_sections(config)
    except (OSError, UnicodeDecodeError) as e:
        return failed_run(
            "SPLIT_SECTIONS_LOAD_FAILED",
            "Failed to load the SKU section table",
            {"sections_csv": meta["sections_source"], "error": repr(e)},
        )

    out_root = config.out_root.expanduser().resolve()
    tmp_root = out_root / TMP_PAGES_DIRNAME
    errors: list[SplitError] = []
    documents: list[DocumentReport] = []
    page_files_by_doc: dict[str, list[Path]] = {}

    try:
        for pdf_relpath in pdf_relpaths:
            report, page_files = _process_document(
                config=config, engine=engine, pdf_relpath=pdf_relpath, tmp_root=tmp_root
            )
            if report.ok and report.doc_id in page_files_by_doc:
                report = _failed_document(
                    doc_id=report.doc_id,
                    pdf_relpath=pdf_relpath,
                    code="SPLIT_DUPLICATE_INPUT",
                    message="The same PDF was passed more than once",
                    detail={"pdf_relpath": pdf_relpath},
                    page_count=report.page_count,
                )
            documents.append(report)
            if report.ok:
                page_files_by_doc[report.doc_id] = page_files

        bundles = [b for d in documents if d.ok for b in d.bundles]
        routing = RoutingEngine(
            config=config.routing,
            sections=sections,
            use_occurrence_quantities=config.policy.use_occurrence_quantities,
        ).route(bundles)

        planned = _plan_outputs(config=config, routing=routing, out_root=out_root)
        if not config.write_outputs:
            outputs = [p.output for p in planned]
        else:
            outputs = []
            for p in planned:
                page_files = [page_files_by_doc[b.document_id][i] for b in p.bundles for i in b.page_indices]
                try:
                    engine.merge_pages(page_files=page_files, out_file=p.out_file, summary=p.summary)
                except Exception as e:
                    errors.append(
                        SplitError(
                            code="SPLIT_BACKEND_MERGE_FAILED",
                            message="Failed to write merged output PDF",
                            detail={"relpath": p.output.relpath, "error": repr(e)},
                        )
                    )
                    continue
                outputs.append(p.output)
                logger.info("wrote %s (%s bundles, %s pages)", p.output.relpath, p.output.bundle_count, p.output.page_count)
    finally:
        if tmp_root.exists():
            shutil.rmtree(tmp_root)

    ok = not errors and all(d.ok for d in documents)
    return SplitRunResult(
        ok=ok,
        engine=config.engine,
        documents=documents,
        routing=routing,
        outputs=outputs,
        errors=errors,
        meta=meta,
    )
