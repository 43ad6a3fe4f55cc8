import hashlib
import json
import logging
import os
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from eventhub.constant_file import (
    encryption_key,
    jwt_algorithm,
    jwt_expires_days,
    jwt_secret,
)

logger = logging.getLogger(__name__)

IV_LENGTH = 16


# ------------------ Passwords ------------------
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


# ------------------ Bearer tokens ------------------
def generate_token(user_id: int, email: str, role: str, expires_in: timedelta = None) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + (expires_in or timedelta(days=jwt_expires_days)),
    }
    return jwt.encode(payload, jwt_secret, algorithm=jwt_algorithm)


def verify_token(token: str):
    """
    Returns the decoded payload, or None when the token is expired,
    tampered with or otherwise unreadable.
    """
    try:
        return jwt.decode(token, jwt_secret, algorithms=[jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.debug("Rejected bearer token: %s", e)
        return None


# ------------------ QR token encryption ------------------
def _cipher_key(key: str = None) -> bytes:
    return hashlib.sha256((key or encryption_key).encode("utf-8")).digest()


def encrypt_qr_token(registration_id: int, user_id: int, key: str = None) -> str:
    """
    AES-256-CBC over {"registrationId", "userId"}. A fresh IV is drawn for
    every call and stored in front of the ciphertext as ``iv_hex:ct_hex``.
    """
    iv = os.urandom(IV_LENGTH)
    plaintext = json.dumps({"registrationId": registration_id, "userId": user_id}).encode("utf-8")

    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()

    encryptor = Cipher(algorithms.AES(_cipher_key(key)), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return f"{iv.hex()}:{ciphertext.hex()}"


def decrypt_qr_token(token: str, key: str = None):
    try:
        iv_hex, ct_hex = token.split(":", 1)
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(ct_hex)
        if len(iv) != IV_LENGTH:
            return None

        decryptor = Cipher(algorithms.AES(_cipher_key(key)), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        plaintext = unpadder.update(padded) + unpadder.finalize()
        return json.loads(plaintext.decode("utf-8"))
    except (AttributeError, ValueError, UnicodeDecodeError):
        return None
