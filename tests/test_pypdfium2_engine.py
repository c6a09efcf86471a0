from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

import pypdfium2 as pdfium

from split_pdf.engines import Pypdfium2Engine
from split_pdf.summary import SUMMARY_PAGE_HEIGHT_PT, SUMMARY_PAGE_WIDTH_PT, SummaryPage, render_summary_image


def _write_blank_pdf(path: Path, page_count: int) -> None:
    pdf = pdfium.PdfDocument.new()
    for _ in range(page_count):
        pdf.new_page(200, 300)
    pdf.save(str(path))
    pdf.close()


class TestPypdfium2Engine(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp(prefix="pdfium_engine_test_"))
        self.addCleanup(shutil.rmtree, self.tmp, True)
        self.src = self.tmp / "three.pdf"
        _write_blank_pdf(self.src, 3)
        self.engine = Pypdfium2Engine()

    def test_page_count_and_texts(self) -> None:
        self.assertEqual(self.engine.backend_id(), "pypdfium2")
        self.assertEqual(self.engine.get_page_count(pdf_file=self.src), 3)
        self.assertEqual(self.engine.extract_page_texts(pdf_file=self.src), ["", "", ""])

    def test_split_then_merge_with_summary(self) -> None:
        pages = self.engine.split_to_single_pages(pdf_file=self.src, out_dir=self.tmp / "pages")
        self.assertEqual([p.name for p in pages], ["page_00001.pdf", "page_00002.pdf", "page_00003.pdf"])
        for p in pages:
            self.assertEqual(self.engine.get_page_count(pdf_file=p), 1)

        out = self.tmp / "merged" / "x3-SKU-A11.OR.pdf"
        written = self.engine.merge_pages(
            page_files=[pages[2], pages[0]],
            out_file=out,
            summary=SummaryPage.for_dedicated("SKU-A11.OR", 3),
        )
        self.assertEqual(written, 3)

        merged = pdfium.PdfDocument(str(out))
        try:
            self.assertEqual(len(merged), 3)
            self.assertEqual(tuple(round(v) for v in merged[0].get_size()), (200, 300))
            self.assertEqual(
                tuple(round(v) for v in merged[2].get_size()), (SUMMARY_PAGE_WIDTH_PT, SUMMARY_PAGE_HEIGHT_PT)
            )
        finally:
            merged.close()

    def test_merge_without_summary(self) -> None:
        pages = self.engine.split_to_single_pages(pdf_file=self.src, out_dir=self.tmp / "pages")
        out = self.tmp / "mix" / "Section_1.pdf"
        self.assertEqual(self.engine.merge_pages(page_files=pages, out_file=out), 3)

    def test_unreadable_pdf_raises(self) -> None:
        bad = self.tmp / "bad.pdf"
        bad.write_bytes(b"not a pdf")
        with self.assertRaises(Exception):
            self.engine.extract_page_texts(pdf_file=bad)


class TestSummaryImage(unittest.TestCase):
    def test_summary_image_is_page_sized_and_not_blank(self) -> None:
        img = render_summary_image(SummaryPage.for_dedicated("SKU-A11.OR", 3), dpi=150)
        self.assertEqual(img.size, (600, 900))
        self.assertLess(img.convert("L").getextrema()[0], 255)

    def test_long_titles_wrap(self) -> None:
        s = SummaryPage.for_mixed("Section With A Very Long Name Indeed")
        self.assertGreater(len(s.title_lines()), 1)
        self.assertEqual(render_summary_image(s).mode, "RGB")


if __name__ == "__main__":
    unittest.main()
