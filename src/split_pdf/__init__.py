"""
PDF stage of the ornament order splitter.

This package is the only one that touches PDFs:
- It extracts page text and hands it to the bundling core.
- It splits source documents into single pages and merges routed bundles
  into per-SKU and per-section outputs.
- It performs NO SKU interpretation of its own.
"""

from .contracts import (
    DocumentReport,
    OutputFile,
    OutputKind,
    PdfEngineName,
    SplitConfig,
    SplitError,
    SplitRunResult,
)
from .module import run_split_orders

__all__ = [
    "DocumentReport",
    "OutputFile",
    "OutputKind",
    "PdfEngineName",
    "SplitConfig",
    "SplitError",
    "SplitRunResult",
    "run_split_orders",
]
