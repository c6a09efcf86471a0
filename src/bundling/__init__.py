from .assembler import AssemblerState, AssemblyResult, BundleAssembler, assemble_bundles
from .classify import classify_page
from .config import BundlingPolicy

__all__ = [
    "AssemblerState",
    "AssemblyResult",
    "BundleAssembler",
    "BundlingPolicy",
    "assemble_bundles",
    "classify_page",
]
