from __future__ import annotations

import unittest

from sku.text_normalize import normalize_for_markers, normalize_for_scan
from sku.token_normalize import normalize_token, strip_customization_artifacts


class TestTextNormalize(unittest.TestCase):
    def test_scan_normalization_cleans_pdf_text_artifacts(self) -> None:
        self.assertEqual(normalize_for_scan(None), "")
        # soft hyphen + zero-width space inside a SKU
        self.assertEqual(normalize_for_scan("SKU\u00ad-12\u200b34"), "SKU-1234")
        self.assertEqual(normalize_for_scan("\ufeffA\u00a0B"), "A B")
        # en dash, minus sign
        self.assertEqual(normalize_for_scan("SKU\u20131234 \u2212 OR\u201012"), "SKU-1234 - OR-12")

    def test_scan_normalization_keeps_line_breaks(self) -> None:
        self.assertEqual(normalize_for_scan("a\t\tb\r\nc\fd"), "a b \nc d")

    def test_marker_normalization_collapses_and_lowercases(self) -> None:
        self.assertEqual(normalize_for_markers(None), "")
        self.assertEqual(normalize_for_markers("  Continued\n ON   next\u00a0Page "), "continued on next page")


class TestTokenNormalize(unittest.TestCase):
    def test_documented_examples(self) -> None:
        self.assertEqual(normalize_token("OR-1234"), "SKU1234.OR")
        self.assertEqual(normalize_token("PF:7890A"), "SKU7890A.PF")
        self.assertEqual(normalize_token("sku-ABC123"), "SKU-ABC123.OR")

    def test_prefix_forms_and_separators(self) -> None:
        self.assertEqual(normalize_token("ORN 5678"), "SKU5678.ORN")
        self.assertEqual(normalize_token("RN-0042"), "SKU0042.RN")
        self.assertEqual(normalize_token("rm:77B"), "SKU77B.RM")

    def test_sku_forms(self) -> None:
        self.assertEqual(normalize_token("SLU-1234"), "SKU-1234.OR")
        self.assertEqual(normalize_token("SKU-ORNAMENT123.PF"), "SKU-ORNAMENT123.PF")
        self.assertEqual(normalize_token("SKU1234.."), "SKU1234.OR")
        self.assertEqual(normalize_token("  SKU 1234 . RN "), "SKU1234.RN")

    def test_customization_artifacts_are_stripped(self) -> None:
        self.assertEqual(strip_customization_artifacts("SKU-1234-CUSTOMIZATIONS"), "SKU-1234")
        self.assertEqual(strip_customization_artifacts("SKU--12--.OR"), "SKU-12.OR")
        self.assertEqual(normalize_token("SKU-1234-Customizations"), "SKU-1234.OR")

    def test_unrecognized_and_missing_input(self) -> None:
        self.assertIsNone(normalize_token(None))
        self.assertEqual(normalize_token("  hello world "), "HELLOWORLD")
        self.assertEqual(normalize_token("   "), "")

    def test_idempotent_for_recognized_tokens(self) -> None:
        for raw in ["OR-1234", "PF:7890A", "sku-ABC123", "ORN 5678", "SLU-99", "SKU1847-P.OR", "SKU-A.RM"]:
            once = normalize_token(raw)
            self.assertEqual(normalize_token(once), once, raw)


if __name__ == "__main__":
    unittest.main()
