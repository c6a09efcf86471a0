from __future__ import annotations

import unittest

from sku.canonicalize import SkuCanonicalizer, canonicalize_tokens, canonicalize_totals, suffix_rank, token_base


class TestSkuCanonicalize(unittest.TestCase):
    def test_better_suffix_wins(self) -> None:
        self.assertEqual(canonicalize_tokens(["SKU1.OR", "SKU1.PF"]), ["SKU1.PF"])
        self.assertEqual(canonicalize_totals({"SKU1.OR": 2, "SKU1.PF": 3}), {"SKU1.PF": 5})

    def test_first_seen_base_order_and_others_last(self) -> None:
        tokens = ["SKU2.OR", "WEIRD", "SKU1.PF", "SKU2.RN", "WEIRD"]
        self.assertEqual(canonicalize_tokens(tokens), ["SKU2.RN", "SKU1.PF", "WEIRD"])

    def test_worse_variant_quantities_fold_into_best(self) -> None:
        totals = {"SKU9.RN": 1, "SKU9.OR": 4, "SKU8.ORN": 2, "LOOSE": 1}
        self.assertEqual(canonicalize_totals(totals), {"SKU9.RN": 5, "SKU8.ORN": 2, "LOOSE": 1})

    def test_suffix_ranks(self) -> None:
        self.assertEqual(suffix_rank(None), suffix_rank("OR"))
        self.assertLess(suffix_rank("PF"), suffix_rank("RN"))
        self.assertLess(suffix_rank("ORN"), suffix_rank("OR"))
        # unknown suffixes rank below every known one
        self.assertGreater(suffix_rank("XX"), suffix_rank("OR"))
        self.assertEqual(canonicalize_tokens(["SKU3.XX", "SKU3.OR"]), ["SKU3.OR"])

    def test_token_base(self) -> None:
        self.assertEqual(token_base("SKU1847-P.OR"), "SKU1847-P")
        self.assertIsNone(token_base("NOSUFFIX"))

    def test_custom_priority_is_validated(self) -> None:
        with self.assertRaises(ValueError):
            SkuCanonicalizer(suffix_priority=())
        with self.assertRaises(ValueError):
            SkuCanonicalizer(suffix_priority=("PF", "RN"))

        c = SkuCanonicalizer(suffix_priority=("OR", "PF"))
        self.assertEqual(c.canonicalize_tokens(["SKU1.PF", "SKU1.OR"]), ["SKU1.OR"])


if __name__ == "__main__":
    unittest.main()
