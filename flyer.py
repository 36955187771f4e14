"""
Printable store flyer: one A4 page with the teaser artwork on top, a large QR
code pointing at the store and the project logo in the bottom right corner.
"""

import io
import logging
from pathlib import Path
from typing import Tuple

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from settings import FlyerLayout, Settings

logger = logging.getLogger(__name__)


class FlyerError(RuntimeError):
    """Raised when the flyer cannot be composed or serialized."""


def _load_image(path: Path) -> ImageReader:
    if not path.exists():
        raise FlyerError(f"Flyer image not found: {path}")
    try:
        return ImageReader(str(path))
    except OSError as exc:
        raise FlyerError(f"Cannot read flyer image {path}: {exc}") from exc


def image_box(image_size: Tuple[int, int], x: float, y: float, width: float,
              max_height: float) -> Tuple[float, float, float, float]:
    """
    Box (x, y, width, height) in mm for an image placed at (x, y) from the
    top-left corner. The aspect ratio is kept; images taller than
    ``max_height`` are scaled down to it.
    """
    px_width, px_height = image_size
    height = width * px_height / px_width
    if height > max_height:
        width = width * max_height / height
        height = max_height
    return x, y, width, height


def _draw_image(pdf: canvas.Canvas, layout: FlyerLayout, image: ImageReader,
                x: float, y: float, width: float, max_height: float) -> None:
    x, y, width, height = image_box(image.getSize(), x, y, width, max_height)
    bottom = layout.page_height - y - height
    pdf.drawImage(image, x * mm, bottom * mm, width=width * mm, height=height * mm, mask="auto")


def _draw_qr_code(pdf: canvas.Canvas, layout: FlyerLayout, target_url: str,
                  error_correction: str) -> None:
    widget = QrCodeWidget(target_url, barLevel=error_correction, barBorder=0)
    x1, y1, x2, y2 = widget.getBounds()
    size = layout.qr_size * mm
    drawing = Drawing(size, size, transform=[size / (x2 - x1), 0, 0, size / (y2 - y1), 0, 0])
    drawing.add(widget)

    bottom = layout.page_height - layout.qr_top - layout.qr_size
    renderPDF.draw(drawing, pdf, layout.qr_left * mm, bottom * mm)


def render_flyer_pdf(target_url: str, settings: Settings, title: str = "") -> bytes:
    """
    Compose the flyer for ``target_url`` and return the PDF document bytes.

    Raises FlyerError when an image asset is missing or the document cannot
    be written.
    """
    layout = settings.flyer
    teaser = _load_image(settings.teaser_image)
    logo = _load_image(settings.logo_image)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(layout.page_width * mm, layout.page_height * mm))
    if title:
        pdf.setTitle(title)

    _draw_qr_code(pdf, layout, target_url, settings.qr_error_correction)
    _draw_image(pdf, layout, teaser, layout.teaser_x, layout.teaser_y, layout.teaser_width,
                layout.teaser_max_height)
    _draw_image(pdf, layout, logo, layout.logo_x, layout.logo_y, layout.logo_width,
                layout.logo_max_height)

    pdf.showPage()
    try:
        pdf.save()
    except OSError as exc:
        raise FlyerError(f"Cannot write flyer PDF: {exc}") from exc

    logger.debug("Composed flyer for %s (%d bytes)", target_url, buffer.tell())
    return buffer.getvalue()
