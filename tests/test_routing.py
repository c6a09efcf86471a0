from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from contracts.bundles import Bundle
from routing.config import RoutingConfig
from routing.engine import RoutingEngine, aggregate_global_totals
from routing.sections import SECTION_MULTI, SECTION_UNKNOWN, SectionResolver, SectionTable


def _bundle(label: int, *skus: str, counts: dict[str, int] | None = None, doc: str = "doc") -> Bundle:
    return Bundle(
        document_id=doc,
        label_page_index=label,
        slip_page_indices=(label + 1,),
        skus=tuple(skus),
        sku_counts=counts if counts is not None else {s: 1 for s in skus},
    )


class TestSectionTable(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="sections_test_"))
        self.addCleanup(shutil.rmtree, self.tmp, True)

    def test_csv_loading_normalizes_keys_and_skips_blanks(self) -> None:
        f = self.tmp / "sections.csv"
        f.write_text("SKU,Section\nSKU-A11,Section 2\n,Section 3\nOR-1234,Section 1\nSKU-B22,\n", encoding="utf-8")

        table = SectionTable.from_csv(f)
        self.assertEqual(dict(table.section_by_sku), {"SKU-A11.OR": "Section 2", "SKU1234.OR": "Section 1"})
        self.assertEqual(table.primary_sections, ("Section 2", "Section 1"))

    def test_csv_without_header_keeps_first_row(self) -> None:
        f = self.tmp / "sections.csv"
        f.write_text("SKU-A11,Section 2\n", encoding="utf-8")
        self.assertEqual(SectionTable.from_csv(f).section_by_sku, {"SKU-A11.OR": "Section 2"})

    def test_table_mapping_is_read_only(self) -> None:
        rows = {"SKU-A11": "Section 2"}
        table = SectionTable(section_by_sku=rows)
        rows["SKU-B22"] = "Section 9"

        self.assertNotIn("SKU-B22", table.section_by_sku)
        with self.assertRaises(TypeError):
            table.section_by_sku["SKU-C33.OR"] = "Section 3"  # type: ignore[index]
        with self.assertRaises(TypeError):
            SectionTable.from_rows([("SKU-A11", "Section 2")]).section_by_sku["SKU-A11.OR"] = "x"  # type: ignore[index]

    def test_packaged_default_table(self) -> None:
        table = SectionTable.default()
        self.assertEqual(table.section_by_sku.get("SKU1847-P.OR"), "Section 1")


class TestSectionResolver(unittest.TestCase):
    def setUp(self) -> None:
        table = SectionTable.from_rows([("SKU-A11", "Section 2"), ("OR-1234", "Section 1")])
        self.resolver = SectionResolver(table)

    def test_find_section(self) -> None:
        self.assertEqual(self.resolver.find_section("  SKU-A11 "), "Section 2")
        self.assertEqual(self.resolver.find_section("SKU-A11.OR"), "Section 2")
        self.assertEqual(self.resolver.find_section("OR-1234"), "Section 1")
        self.assertIsNone(self.resolver.find_section("SKU-NOPE"))
        self.assertIsNone(self.resolver.find_section("   "))
        self.assertIsNone(self.resolver.find_section(None))

    def test_resolve_section(self) -> None:
        self.assertEqual(self.resolver.resolve_section([]), SECTION_UNKNOWN)
        self.assertEqual(self.resolver.resolve_section(["SKU-NOPE"]), SECTION_UNKNOWN)
        self.assertEqual(self.resolver.resolve_section(["SKU-A11", "SKU-NOPE"]), "Section 2")
        self.assertEqual(self.resolver.resolve_section(["SKU-A11", "OR-1234"]), SECTION_MULTI)


class TestRoutingEngine(unittest.TestCase):
    def setUp(self) -> None:
        self.empty_sections = SectionTable.from_rows([])

    def test_threshold_moves_bundle_to_dedicated(self) -> None:
        engine = RoutingEngine(sections=self.empty_sections)

        two = engine.route([_bundle(0, "SKU-A11.OR"), _bundle(2, "SKU-A11.OR")])
        self.assertEqual(two.global_totals, {"SKU-A11.OR": 2})
        self.assertEqual(two.dedicated, ())
        self.assertEqual([(g.section, len(g.bundles)) for g in two.mixed], [(SECTION_UNKNOWN, 2)])

        three = engine.route([_bundle(0, "SKU-A11.OR"), _bundle(2, "SKU-A11.OR"), _bundle(4, "SKU-A11.OR")])
        self.assertEqual([(g.sku, g.total_units, len(g.bundles)) for g in three.dedicated], [("SKU-A11.OR", 3, 3)])
        self.assertEqual(three.mixed, ())

    def test_two_high_volume_skus_go_mixed(self) -> None:
        bundles = [_bundle(i * 2, "SKU-A11.OR") for i in range(3)]
        bundles += [_bundle(10 + i * 2, "SKU-B22.OR") for i in range(3)]
        both = _bundle(30, "SKU-A11.OR", "SKU-B22.OR")
        bundles.append(both)

        r = RoutingEngine(sections=self.empty_sections).route(bundles)
        self.assertEqual([(g.sku, g.total_units, len(g.bundles)) for g in r.dedicated], [("SKU-A11.OR", 4, 3), ("SKU-B22.OR", 4, 3)])
        self.assertEqual(len(r.mixed), 1)
        self.assertEqual(r.mixed[0].bundles, (both,))
        self.assertEqual(r.bundle_count, len(bundles))

    def test_one_high_volume_sku_plus_low_volume_is_dedicated(self) -> None:
        bundles = [_bundle(i * 2, "SKU-A11.OR") for i in range(3)] + [_bundle(10, "SKU-A11.OR", "SKU-C33.OR")]
        r = RoutingEngine(sections=self.empty_sections).route(bundles)
        self.assertEqual([(g.sku, len(g.bundles)) for g in r.dedicated], [("SKU-A11.OR", 4)])
        self.assertEqual(r.mixed, ())

    def test_suffix_variants_across_bundles_share_one_total(self) -> None:
        bundles = [_bundle(0, "SKU-A11.OR"), _bundle(2, "SKU-A11.PF"), _bundle(4, "SKU-A11.OR")]
        r = RoutingEngine(sections=self.empty_sections).route(bundles)
        self.assertEqual(r.global_totals, {"SKU-A11.PF": 3})
        self.assertEqual([(g.sku, len(g.bundles)) for g in r.dedicated], [("SKU-A11.PF", 3)])

    def test_mixed_groups_follow_primary_section_order(self) -> None:
        table = SectionTable.from_rows([("SKU-S1", "Section 1"), ("SKU-S2", "Section 2")])
        bundles = [
            _bundle(0, "SKU-Z99.OR"),
            _bundle(2, "SKU-S2.OR"),
            _bundle(4, "SKU-S1.OR"),
            _bundle(6, "SKU-S1.OR", "SKU-S2.OR"),
        ]
        r = RoutingEngine(config=RoutingConfig(min_units_for_dedicated=99), sections=table).route(bundles)
        self.assertEqual(
            [g.section for g in r.mixed],
            ["Section 1", "Section 2", SECTION_UNKNOWN, SECTION_MULTI],
        )

    def test_occurrence_quantities(self) -> None:
        bundles = [_bundle(0, "SKU-A11.OR", counts={"SKU-A11.OR": 3})]

        self.assertEqual(aggregate_global_totals(bundles), {"SKU-A11.OR": 1})
        self.assertEqual(aggregate_global_totals(bundles, use_occurrence_quantities=True), {"SKU-A11.OR": 3})

    def test_occurrence_quantities_do_not_change_threshold(self) -> None:
        engine = RoutingEngine(sections=self.empty_sections, use_occurrence_quantities=True)

        one_big_order = engine.route([_bundle(0, "SKU-A11.OR", counts={"SKU-A11.OR": 3})])
        self.assertEqual(one_big_order.global_totals, {"SKU-A11.OR": 1})
        self.assertEqual(one_big_order.dedicated, ())
        self.assertEqual(len(one_big_order.mixed), 1)

        two_orders = engine.route([_bundle(i * 2, "SKU-A11.OR", counts={"SKU-A11.OR": 2}) for i in range(2)])
        self.assertEqual(two_orders.dedicated, ())

    def test_occurrence_quantities_set_published_units(self) -> None:
        bundles = [
            _bundle(0, "SKU-A11.OR", counts={"SKU-A11.OR": 2}),
            _bundle(2, "SKU-A11.PF", counts={"SKU-A11.PF": 4}),
            _bundle(4, "SKU-A11.OR", counts={}),
        ]
        r = RoutingEngine(sections=self.empty_sections, use_occurrence_quantities=True).route(bundles)
        self.assertEqual([(g.sku, g.total_units, len(g.bundles)) for g in r.dedicated], [("SKU-A11.PF", 7, 3)])

        plain = RoutingEngine(sections=self.empty_sections).route(bundles)
        self.assertEqual([(g.sku, g.total_units) for g in plain.dedicated], [("SKU-A11.PF", 3)])

    def test_routing_config_validation(self) -> None:
        with self.assertRaises(ValueError):
            RoutingConfig(min_units_for_dedicated=0)
        with self.assertRaises(TypeError):
            RoutingConfig(min_units_for_dedicated="3")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
