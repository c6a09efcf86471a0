from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..summary import SummaryPage


class PdfEngine(ABC):
    """
    PDF backend abstraction for the order splitter.

    Engines must:
    - Extract one text string per page, in page order ("" for pages without text)
    - Split a document into single-page files named page_00001.pdf, ...
    - Merge page files in the given order, optionally appending a summary page
    - Perform NO interpretation of the text they extract
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def get_page_count(self, *, pdf_file: Path) -> int:
        raise NotImplementedError

    @abstractmethod
    def extract_page_texts(self, *, pdf_file: Path) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def split_to_single_pages(self, *, pdf_file: Path, out_dir: Path) -> list[Path]:
        """
        Return the written page files, index i holding page i (0-indexed).
        """

        raise NotImplementedError

    @abstractmethod
    def merge_pages(self, *, page_files: list[Path], out_file: Path, summary: SummaryPage | None = None) -> int:
        """
        Write `page_files` (in order) to `out_file`; return the total page count written.
        """

        raise NotImplementedError
