from __future__ import annotations

from pathlib import Path

from ..summary import SUMMARY_PAGE_HEIGHT_PT, SUMMARY_PAGE_WIDTH_PT, SummaryPage, render_summary_image

from .base import PdfEngine


class Pypdfium2Engine(PdfEngine):
    def backend_id(self) -> str:
        return "pypdfium2"

    def backend_version(self) -> str | None:
        try:
            import pypdfium2 as pdfium  # type: ignore

            return getattr(pdfium, "__version__", None)
        except Exception:
            return None

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError("Missing dependency: pypdfium2 is required for PDF splitting.") from e

    def get_page_count(self, *, pdf_file: Path) -> int:
        pdfium = self._require_pdfium()
        doc = pdfium.PdfDocument(str(pdf_file))
        try:
            return len(doc)
        finally:
            doc.close()

    def extract_page_texts(self, *, pdf_file: Path) -> list[str]:
        pdfium = self._require_pdfium()
        doc = pdfium.PdfDocument(str(pdf_file))
        texts: list[str] = []
        try:
            for i in range(len(doc)):
                page = doc[i]
                textpage = page.get_textpage()
                texts.append(textpage.get_text_range() or "")
                textpage.close()
                page.close()
        finally:
            doc.close()
        return texts

    def split_to_single_pages(self, *, pdf_file: Path, out_dir: Path) -> list[Path]:
        pdfium = self._require_pdfium()
        out_dir.mkdir(parents=True, exist_ok=True)

        doc = pdfium.PdfDocument(str(pdf_file))
        written: list[Path] = []
        try:
            for i in range(len(doc)):
                single = pdfium.PdfDocument.new()
                single.import_pages(doc, [i])
                out_file = out_dir / f"page_{i + 1:05d}.pdf"
                single.save(str(out_file))
                single.close()
                written.append(out_file)
        finally:
            doc.close()
        return written

    def _append_summary_page(self, pdfium, dest, summary: SummaryPage) -> None:
        page = dest.new_page(SUMMARY_PAGE_WIDTH_PT, SUMMARY_PAGE_HEIGHT_PT)
        image = pdfium.PdfImage.new(dest)
        image.set_bitmap(pdfium.PdfBitmap.from_pil(render_summary_image(summary)))
        # Image objects are a 1x1 unit square until scaled to the page.
        image.set_matrix(pdfium.PdfMatrix().scale(SUMMARY_PAGE_WIDTH_PT, SUMMARY_PAGE_HEIGHT_PT))
        page.insert_obj(image)
        page.gen_content()
        page.close()

    def merge_pages(self, *, page_files: list[Path], out_file: Path, summary: SummaryPage | None = None) -> int:
        pdfium = self._require_pdfium()
        out_file.parent.mkdir(parents=True, exist_ok=True)

        dest = pdfium.PdfDocument.new()
        sources = []
        try:
            for f in page_files:
                src = pdfium.PdfDocument(str(f))
                sources.append(src)
                dest.import_pages(src)
            if summary is not None:
                self._append_summary_page(pdfium, dest, summary)
            page_count = len(dest)
            dest.save(str(out_file))
        finally:
            dest.close()
            for src in sources:
                src.close()
        return page_count
