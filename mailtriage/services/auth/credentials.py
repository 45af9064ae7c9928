from typing import Dict, Iterable, List, Optional, Tuple

from mailtriage.errors import AuthenticationFailure
from mailtriage.lib.shared.models.account import Account
from mailtriage.services.security.passwords import hash_password, verify_password

# Demo accounts (id, email, password). Only the hashes are kept in memory.
DEFAULT_ACCOUNTS: List[Tuple[str, str, str]] = [
    ("1", "user@example.com", "password"),
    ("2", "test@test.com", "password"),
]

class CredentialStore:
    """Fixed, read-only set of accounts, looked up by email."""

    def __init__(self, accounts: Iterable[Account]):
        self._by_email: Dict[str, Account] = {a.email: a for a in accounts}
        # Compared against when the email is unknown, so both failure paths cost the same
        self._decoy_hash = hash_password("decoy")

    @classmethod
    def with_defaults(cls) -> "CredentialStore":
        return cls(
            Account(id=account_id, email=email, password_hash=hash_password(password))
            for account_id, email, password in DEFAULT_ACCOUNTS
        )

    def find(self, email: str) -> Optional[Account]:
        return self._by_email.get(email)

    def authenticate(self, email: str, password: str) -> Account:
        account = self.find(email)
        if account is None:
            verify_password(password, self._decoy_hash)
            raise AuthenticationFailure("Invalid credentials")
        if not verify_password(password, account.password_hash):
            raise AuthenticationFailure("Invalid credentials")
        return account
