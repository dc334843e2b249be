from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image, UnidentifiedImageError

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError


def decode_image(stream: BinaryIO) -> list[str]:
    """Return the text of every QR/barcode found in an uploaded image."""

    # Imported here: pyzbar needs the zbar shared library at import time.
    from pyzbar.pyzbar import decode as pyzbar_decode

    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError(f"Unreadable image: {e}") from e

    return [d.data.decode("utf-8", errors="replace") for d in pyzbar_decode(img)]


def badge_payload(last_name: str, first_name: str, country: str) -> str:
    last_name = require_non_empty(last_name, "Last name")
    first_name = require_non_empty(first_name, "First name")
    country = require_non_empty(country, "Country")
    return f"{last_name.upper()}, {first_name}, {country}"


def make_badge_png(last_name: str, first_name: str, country: str) -> bytes:
    """PNG QR code in the primary ``LAST NAME, First Name, Country`` format."""

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(badge_payload(last_name, first_name, country))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
