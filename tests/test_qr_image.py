"""Tests for QR code PNG rendering."""

import io
import unittest

import qrcode
from PIL import Image

from qr_image import QUIET_ZONE, QRCodeError, render_qr_png

PROJECT_URL = "https://engpass.appspot.com/store/cafe-berlin-1"


def expected_matrix(data):
    qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_H, border=QUIET_ZONE)
    qr.add_data(data)
    qr.make(fit=True)
    return qr.get_matrix()


def sampled_matrix(png, modules, size_px=1024):
    """Read the module grid back from the PNG by sampling each module centre."""
    image = Image.open(io.BytesIO(png)).convert("L")
    box = size_px // modules
    offset = (size_px - modules * box) // 2
    return [
        [image.getpixel((offset + col * box + box // 2, offset + row * box + box // 2)) < 128
         for col in range(modules)]
        for row in range(modules)
    ]


class RenderQrPngTests(unittest.TestCase):
    """Tests for render_qr_png."""

    def test_png_has_requested_size(self):
        """Output is a square PNG of exactly the requested size."""
        data = render_qr_png("https://engpass.appspot.com/store/cafe-berlin-1")

        self.assertTrue(data.startswith(b"\x89PNG\r\n\x1a\n"))
        image = Image.open(io.BytesIO(data))
        self.assertEqual(image.format, "PNG")
        self.assertEqual(image.size, (1024, 1024))

    def test_custom_size(self):
        data = render_qr_png("hello", size_px=300)
        self.assertEqual(Image.open(io.BytesIO(data)).size, (300, 300))

    def test_image_has_dark_modules_and_white_border(self):
        """The symbol is drawn black on white with a quiet zone around it."""
        image = Image.open(io.BytesIO(render_qr_png("hello"))).convert("L")

        self.assertEqual(image.getpixel((0, 0)), 255)
        self.assertEqual(image.getextrema(), (0, 255))

    def test_too_much_data_raises(self):
        """Data beyond the largest QR version is reported, not swallowed."""
        with self.assertRaises(QRCodeError):
            render_qr_png("x" * 5000)

    def test_canvas_too_small_raises(self):
        with self.assertRaises(QRCodeError):
            render_qr_png("hello", size_px=10)

    def test_unknown_error_correction_level_raises(self):
        with self.assertRaises(QRCodeError):
            render_qr_png("hello", error_correction="X")


class QrPayloadTests(unittest.TestCase):
    """The rendered modules match a level H encoding of the input."""

    def test_modules_match_encoding_of_data(self):
        matrix = expected_matrix(PROJECT_URL)

        sampled = sampled_matrix(render_qr_png(PROJECT_URL), len(matrix))

        self.assertEqual(sampled, matrix)

    def test_different_data_gives_different_modules(self):
        matrix = expected_matrix(PROJECT_URL)
        other = render_qr_png("https://engpass.appspot.com/store/another-store")

        self.assertNotEqual(sampled_matrix(other, len(matrix)), matrix)
