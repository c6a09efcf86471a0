from .base import PdfEngine
from .pypdfium2_engine import Pypdfium2Engine

__all__ = ["PdfEngine", "Pypdfium2Engine"]
