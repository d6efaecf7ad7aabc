# keep/core/qr.py
import uuid
from io import BytesIO

import qrcode

from keep.core.config import get_settings

settings = get_settings()


def public_asset_url(asset_id: uuid.UUID) -> str:
    """
    URL encoded in an asset's QR label; resolves to the public lookup page.
    """
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/asset/{asset_id}"


def generate_qr_code_image(data: str) -> BytesIO:
    """Render `data` as a PNG QR code."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)
    return buffer
