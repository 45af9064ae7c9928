import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 100_000

def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=iterations)

def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Returns `pbkdf2_sha256$<iterations>$<salt>$<hash>` with base64 salt and hash."""
    salt = os.urandom(16)
    digest = _kdf(salt, iterations).derive(password.encode())
    return "$".join([
        ALGORITHM,
        str(iterations),
        base64.b64encode(salt).decode(),
        base64.b64encode(digest).decode(),
    ])

def verify_password(password: str, encoded: str) -> bool:
    try:
        algorithm, iterations, salt, digest = encoded.split("$")
        if algorithm != ALGORITHM:
            return False
        _kdf(base64.b64decode(salt), int(iterations)).verify(password.encode(), base64.b64decode(digest))
        return True
    except (InvalidKey, ValueError):
        return False
