import pytest
from cryptography.fernet import Fernet

from mailtriage.errors import AuthenticationFailure
from mailtriage.lib.shared.models.account import Account
from mailtriage.services.auth.credentials import CredentialStore
from mailtriage.services.security.passwords import hash_password, verify_password
from mailtriage.services.security.tokens import TokenService

pytestmark = pytest.mark.offline

ACCOUNT = Account(id="7", email="alex@techflow.com", password_hash="unused")
NOW = 1_700_000_000

class TestTokens:
    def test_round_trip_claims(self):
        service = TokenService("secret", ttl_hours=24)
        claims = service.verify(service.issue(ACCOUNT, now=NOW), now=NOW + 60)
        assert claims.user_id == "7"
        assert claims.email == "alex@techflow.com"
        assert claims.issued_at.timestamp() == NOW
        assert claims.expires_at.timestamp() == NOW + 24 * 3600

    def test_expired(self):
        service = TokenService("secret", ttl_hours=1)
        token = service.issue(ACCOUNT, now=NOW)
        with pytest.raises(AuthenticationFailure):
            service.verify(token, now=NOW + 3601)

    def test_other_secret(self):
        token = TokenService("secret").issue(ACCOUNT, now=NOW)
        with pytest.raises(AuthenticationFailure):
            TokenService("another-secret").verify(token, now=NOW)

    def test_tampered(self):
        service = TokenService("secret")
        token = service.issue(ACCOUNT, now=NOW)
        tampered = token[:-6] + ("A" if token[-6] != "A" else "B") + token[-5:]
        with pytest.raises(AuthenticationFailure):
            service.verify(tampered, now=NOW)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "ü"])
    def test_malformed(self, token):
        with pytest.raises(AuthenticationFailure):
            TokenService("secret").verify(token, now=NOW)

    def test_accepts_fernet_key(self):
        key = Fernet.generate_key().decode()
        service = TokenService(key)
        assert service.verify(service.issue(ACCOUNT, now=NOW), now=NOW).user_id == "7"

    def test_default_secret_still_works(self):
        service = TokenService(None)
        assert service.verify(service.issue(ACCOUNT)).email == "alex@techflow.com"


class TestPasswords:
    def test_hash_and_verify(self):
        encoded = hash_password("hunter2", iterations=1000)
        assert encoded.startswith("pbkdf2_sha256$1000$")
        assert "hunter2" not in encoded
        assert verify_password("hunter2", encoded)
        assert not verify_password("hunter3", encoded)

    def test_salted(self):
        assert hash_password("same", iterations=1000) != hash_password("same", iterations=1000)

    @pytest.mark.parametrize("encoded", ["", "plaintext", "md5$1$a$b", "pbkdf2_sha256$x$y$z"])
    def test_unusable_hashes(self, encoded):
        assert verify_password("password", encoded) is False


class TestCredentialStore:
    @pytest.fixture(scope="class")
    def store(self):
        return CredentialStore.with_defaults()

    def test_authenticate(self, store):
        assert store.authenticate("test@test.com", "password").id == "2"

    def test_wrong_password(self, store):
        with pytest.raises(AuthenticationFailure):
            store.authenticate("test@test.com", "nope")

    def test_unknown_email(self, store):
        with pytest.raises(AuthenticationFailure):
            store.authenticate("ghost@test.com", "password")
        assert store.find("ghost@test.com") is None
