import io
import logging

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}

QUIET_ZONE = 4


class QRCodeError(RuntimeError):
    """Raised when the data cannot be encoded as a QR code."""


def render_qr_png(data: str, size_px: int = 1024, error_correction: str = "H") -> bytes:
    """
    Encode ``data`` as a square PNG of exactly ``size_px`` pixels.

    The QR version is picked automatically. Modules are drawn at the largest
    whole-pixel size that fits and the symbol is centered on a white canvas.
    """
    try:
        level = ERROR_CORRECTION_LEVELS[error_correction]
    except KeyError:
        raise QRCodeError(f"unknown error correction level {error_correction!r}") from None

    qr = qrcode.QRCode(version=None, error_correction=level, border=QUIET_ZONE)
    qr.add_data(data)
    try:
        qr.make(fit=True)
    except DataOverflowError as exc:
        raise QRCodeError(f"cannot encode {len(data)} characters as QR code: {exc}") from exc

    modules = qr.modules_count + 2 * QUIET_ZONE
    qr.box_size = size_px // modules
    if qr.box_size < 1:
        raise QRCodeError(
            f"QR code with {modules} modules does not fit into {size_px}x{size_px} pixels"
        )

    symbol = qr.make_image(fill_color="black", back_color="white").get_image().convert("1")
    canvas = Image.new("1", (size_px, size_px), 1)
    offset = (size_px - symbol.size[0]) // 2
    canvas.paste(symbol, (offset, offset))

    buffer = io.BytesIO()
    canvas.save(buffer, format="PNG")
    logger.debug("Rendered QR code version %s for %s", qr.version, data)
    return buffer.getvalue()
