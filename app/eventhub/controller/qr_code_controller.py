import base64
import json
import secrets
import time
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_H

from eventhub.errors import ValidationError
from eventhub.models.registration_model import Registration
from eventhub.security import encrypt_qr_token


def build_qr_payload(registration_id: int, event_id: int):
    """Returns the JSON text embedded in the QR image and its random token."""
    token = secrets.token_hex(32)
    payload = json.dumps({
        "registrationId": registration_id,
        "eventId": event_id,
        "token": token,
        "timestamp": int(time.time() * 1000),
    })
    return payload, token


def render_qr_data_url(payload: str) -> str:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, box_size=10, border=1)
    qr.add_data(payload)
    qr.make(fit=True)
    qr_img = qr.make_image()

    buffered = BytesIO()
    qr_img.save(buffered, format="PNG")
    qr_base64 = base64.b64encode(buffered.getvalue()).decode("utf-8")
    return f"data:image/png;base64,{qr_base64}"


def issue_qr_credentials(registration: Registration):
    """Fill the QR fields of a flushed registration (its id must be known)."""
    payload, token = build_qr_payload(registration.id, registration.event_id)
    registration.qr_secret = token
    registration.qr_code_data = render_qr_data_url(payload)
    registration.qr_token = encrypt_qr_token(registration.id, registration.user_id)
    return payload


def parse_qr_payload(qr_data: str) -> dict:
    try:
        payload = json.loads(qr_data)
    except (TypeError, ValueError):
        raise ValidationError("Invalid QR code format", code="INVALID_QR")
    if not isinstance(payload, dict):
        raise ValidationError("Invalid QR code format", code="INVALID_QR")

    registration_id = payload.get("registrationId", payload.get("registration_id"))
    try:
        registration_id = int(registration_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid QR code", code="INVALID_QR")

    event_id = payload.get("eventId", payload.get("event_id"))
    return {
        "registration_id": registration_id,
        "event_id": event_id,
        "token": payload.get("token"),
        "timestamp": payload.get("timestamp"),
    }
