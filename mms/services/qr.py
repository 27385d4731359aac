"""QR code generation for member cards and event check-in."""

from __future__ import annotations

import base64
import io
import json
from typing import Any

import qrcode
from qrcode.image.pure import PyPNGImage

from mms.services.errors import ValidationError
from mms.services.helpers import utcnow


class QRCodeService:
    """Encodes JSON payloads as PNG data URLs."""

    def _render(self, payload: dict[str, Any]) -> str:
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(json.dumps(payload))
        qr.make(fit=True)

        img = qr.make_image(image_factory=PyPNGImage)
        buf = io.BytesIO()
        img.save(buf)
        encoded = base64.b64encode(buf.getvalue()).decode('ascii')
        return f"data:image/png;base64,{encoded}"

    def generate_member_qr(self, id: str, member_id: str) -> str:
        return self._render({
            'type': 'member',
            'memberId': member_id,
            'id': id,
            'timestamp': utcnow().isoformat(),
        })

    def generate_event_qr(self, id: str, title: str) -> str:
        return self._render({
            'type': 'event',
            'eventId': id,
            'title': title,
            'timestamp': utcnow().isoformat(),
        })

    def decode_qr(self, text: str) -> dict[str, Any]:
        """Parse the JSON payload read from a scanned code."""
        try:
            payload = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise ValidationError('Invalid QR code format') from exc
        if not isinstance(payload, dict):
            raise ValidationError('Invalid QR code format')
        return payload


qr_service = QRCodeService()

__all__ = ["QRCodeService", "qr_service"]
