from .canonicalize import (
    DEFAULT_CANONICALIZER,
    SkuCanonicalizer,
    canonicalize_tokens,
    canonicalize_totals,
    suffix_rank,
    token_base,
)
from .corrections import DEFAULT_CORRECTIONS, SKU1847_WRAPPED_P_OR_NEW, TokenCorrection, apply_corrections
from .extract import DEFAULT_EXTRACTOR, SkuExtractor, estimate_block_quantity, find_order_id
from .patterns import PATTERNS_VERSION
from .text_normalize import normalize_for_markers, normalize_for_scan
from .token_normalize import normalize_token, strip_customization_artifacts

__all__ = [
    "DEFAULT_CANONICALIZER",
    "DEFAULT_CORRECTIONS",
    "DEFAULT_EXTRACTOR",
    "PATTERNS_VERSION",
    "SKU1847_WRAPPED_P_OR_NEW",
    "SkuCanonicalizer",
    "SkuExtractor",
    "TokenCorrection",
    "apply_corrections",
    "canonicalize_tokens",
    "canonicalize_totals",
    "estimate_block_quantity",
    "find_order_id",
    "normalize_for_markers",
    "normalize_for_scan",
    "normalize_token",
    "strip_customization_artifacts",
    "suffix_rank",
    "token_base",
]
