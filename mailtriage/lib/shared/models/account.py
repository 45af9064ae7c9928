from dataclasses import dataclass
from datetime import datetime

@dataclass(frozen=True)
class Account:
    id: str
    email: str
    password_hash: str

@dataclass
class SessionClaims:
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime

    def to_json(self) -> dict:
        return {
            "userId": self.user_id,
            "email": self.email,
            "iat": int(self.issued_at.timestamp()),
            "exp": int(self.expires_at.timestamp()),
        }
