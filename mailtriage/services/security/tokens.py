import base64
import binascii
import hashlib
import json
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from mailtriage.errors import AuthenticationFailure
from mailtriage.lib.shared.models.account import Account, SessionClaims

logger = logging.getLogger(__name__)

class TokenService:
    """
    Issues and verifies session tokens.
    Uses Fernet, which authenticates the payload (HMAC) and timestamps it, so both
    tampering and expiry are detected on decrypt.
    """
    def __init__(self, secret: Optional[str] = None, ttl_hours: int = 24):
        if not secret:
            # Fallback for dev/demo if not set (NOT SECURE but functional)
            logger.warning("⚠️  SECURITY WARNING: MAILTRIAGE_TOKEN_SECRET not set. Using insecure default key for development.")
            secret = "mailtriage_insecure_dev_secret"

        self.ttl_seconds = int(ttl_hours * 3600)
        self.fernet = Fernet(self._to_key(secret))

    @staticmethod
    def _to_key(secret: str) -> bytes:
        # Accept a ready-made Fernet key, otherwise derive one from the passphrase
        try:
            if len(base64.urlsafe_b64decode(secret.encode())) == 32:
                return secret.encode()
        except (binascii.Error, ValueError):
            pass
        return base64.urlsafe_b64encode(hashlib.sha256(secret.encode()).digest())

    def issue(self, account: Account, now: Optional[float] = None) -> str:
        issued = int(now if now is not None else time.time())
        claims = SessionClaims(
            user_id=account.id,
            email=account.email,
            issued_at=datetime.fromtimestamp(issued, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(issued + self.ttl_seconds, tz=timezone.utc),
        )
        payload = json.dumps(claims.to_json()).encode()
        return self.fernet.encrypt_at_time(payload, issued).decode()

    def verify(self, token: str, now: Optional[float] = None) -> SessionClaims:
        """Returns the claims of a valid token. Raises AuthenticationFailure otherwise."""
        current = int(now if now is not None else time.time())
        try:
            payload = self.fernet.decrypt_at_time(token.encode(), self.ttl_seconds, current)
            data = json.loads(payload)
            claims = SessionClaims(
                user_id=str(data["userId"]),
                email=data["email"],
                issued_at=datetime.fromtimestamp(data["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
            )
        except (InvalidToken, ValueError, KeyError, TypeError) as e:
            raise AuthenticationFailure("Invalid token") from e

        if claims.expires_at.timestamp() <= current:
            raise AuthenticationFailure("Token expired")
        return claims
