"""
QR code generation service
"""

import io
from typing import Optional
from urllib.parse import quote

import qrcode

from wedding_planner.core.config import settings

class QRService:
    """QR codes pointing guests at the guest area"""

    @staticmethod
    def get_portal_url(email: Optional[str] = None) -> str:
        """URL the QR code opens; optionally pre-fills the guest's email"""
        url = f"{settings.BASE_URL}/guest-area"
        if email:
            url += f"?email={quote(email)}"
        return url

    @staticmethod
    def generate_portal_qr(email: Optional[str] = None, format: str = "PNG") -> bytes:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(QRService.get_portal_url(email))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()
