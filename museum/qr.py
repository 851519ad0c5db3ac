"""
QR code rendering as embeddable PNG data URIs.
"""

from __future__ import annotations

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

DATA_URI_PREFIX = "data:image/png;base64,"


def make_qr_data_uri(content: str) -> str:
    """Encode `content` as a QR code and return it as a PNG data URI."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=4, border=4)
    qr.add_data(content)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    image.save(buffer)
    return DATA_URI_PREFIX + base64.b64encode(buffer.getvalue()).decode("ascii")
