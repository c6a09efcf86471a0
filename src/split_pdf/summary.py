from __future__ import annotations

import textwrap
from dataclasses import dataclass

# 4x6 inch label stock, in PDF points (1/72 inch).
SUMMARY_PAGE_WIDTH_PT = 288
SUMMARY_PAGE_HEIGHT_PT = 432

_RENDER_DPI = 150
_TITLE_SIZE_PX = 64
_SUBTITLE_SIZE_PX = 48
_WRAP_CHARS = 16


@dataclass(frozen=True, slots=True)
class SummaryPage:
    """
    Cover sheet appended to a merged output: the group label and, for
    dedicated groups, the unit count.
    """

    title: str
    subtitle: str | None = None

    @staticmethod
    def for_dedicated(sku: str, units: int) -> "SummaryPage":
        return SummaryPage(title=sku, subtitle=f"Qty: {units}")

    @staticmethod
    def for_mixed(label: str) -> "SummaryPage":
        return SummaryPage(title=label)

    def title_lines(self) -> list[str]:
        return textwrap.wrap(self.title, width=_WRAP_CHARS, break_long_words=True) or [""]


def _require_pil():
    try:
        from PIL import Image, ImageDraw, ImageFont  # type: ignore

        return Image, ImageDraw, ImageFont
    except ImportError as e:
        raise RuntimeError("Missing dependency: Pillow is required to render summary pages.") from e


def render_summary_image(summary: SummaryPage, *, dpi: int = _RENDER_DPI):
    """
    Render the summary page as a white RGB image sized to the 4x6 page.
    """

    Image, ImageDraw, ImageFont = _require_pil()

    width_px = round(SUMMARY_PAGE_WIDTH_PT * dpi / 72)
    height_px = round(SUMMARY_PAGE_HEIGHT_PT * dpi / 72)
    img = Image.new("RGB", (width_px, height_px), "white")
    draw = ImageDraw.Draw(img)

    rows = [(line, ImageFont.load_default(size=_TITLE_SIZE_PX)) for line in summary.title_lines()]
    if summary.subtitle:
        rows.append((summary.subtitle, ImageFont.load_default(size=_SUBTITLE_SIZE_PX)))

    gap = _SUBTITLE_SIZE_PX // 2
    boxes = [draw.textbbox((0, 0), text, font=font) for text, font in rows]
    total_h = sum(b[3] - b[1] for b in boxes) + gap * (len(rows) - 1)

    y = (height_px - total_h) // 2
    for (text, font), box in zip(rows, boxes):
        w = box[2] - box[0]
        h = box[3] - box[1]
        draw.text(((width_px - w) // 2 - box[0], y - box[1]), text, fill="black", font=font)
        y += h + gap

    return img
