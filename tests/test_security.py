"""
Unit Tests for Security Module
Tests for: password hashing, token issue/verify
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from core.config import settings
from core.exceptions import TokenError, TokenExpiredError
from core.security import TokenService, get_token_service, hash_password, verify_password
from schemas.auth_schema import IdentityClaim


@pytest.fixture
def claim() -> IdentityClaim:
    return IdentityClaim(id=7, name="Site Manager", email="manager@example.com")


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret_key="unit-test-secret", expires_minutes=60)


class TestPasswordHashing:
    """Test password hashing functions"""

    def test_hash_is_not_the_password(self):
        hashed = hash_password("testpassword123")

        assert hashed != "testpassword123"
        assert hashed.startswith("$2")

    def test_hash_is_salted(self):
        """Same password, different salts"""
        assert hash_password("testpassword123") != hash_password("testpassword123")

    def test_verify_password_correct(self):
        hashed = hash_password("testpassword123")

        assert verify_password("testpassword123", hashed) is True

    def test_verify_password_incorrect(self):
        hashed = hash_password("testpassword123")

        assert verify_password("wrongpassword", hashed) is False

    def test_rounds_follow_settings(self):
        hashed = hash_password("testpassword123")

        assert hashed.split("$")[2] == f"{settings.BCRYPT_ROUNDS:02d}"

    def test_long_password_truncated_to_bcrypt_limit(self):
        hashed = hash_password("a" * 100)

        assert verify_password("a" * 100, hashed) is True

    def test_unicode_password(self):
        hashed = hash_password("pässwörd-✓")

        assert verify_password("pässwörd-✓", hashed) is True

    def test_verify_against_non_bcrypt_value(self):
        assert verify_password("anything", "not-a-hash") is False


class TestTokenService:
    """Test token issue/verify"""

    def test_round_trip_returns_claim(self, token_service, claim):
        token = token_service.issue(claim)

        assert token_service.verify(token) == claim

    def test_token_expires_one_hour_after_issue(self, token_service, claim):
        token = token_service.issue(claim)

        payload = jwt.decode(token, "unit-test-secret", algorithms=["HS256"])
        exp = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = (exp - datetime.now(timezone.utc)).total_seconds()
        assert 3500 < remaining <= 3600

    def test_payload_carries_identity(self, token_service, claim):
        token = token_service.issue(claim)

        payload = jwt.decode(token, "unit-test-secret", algorithms=["HS256"])
        assert payload["sub"] == "7"
        assert payload["user"] == {"id": 7, "name": "Site Manager", "email": "manager@example.com"}

    def test_expired_token_rejected(self, token_service, claim):
        token = token_service.issue(claim, expires_delta=timedelta(seconds=-10))

        with pytest.raises(TokenExpiredError):
            token_service.verify(token)

    def test_expired_error_is_a_token_error(self):
        assert issubclass(TokenExpiredError, TokenError)

    def test_wrong_signature_rejected(self, token_service, claim):
        forged = TokenService(secret_key="someone-else").issue(claim)

        with pytest.raises(TokenError) as exc_info:
            token_service.verify(forged)
        assert exc_info.value.code == "INVALID_TOKEN"

    def test_tampered_payload_rejected(self, token_service, claim):
        header, payload, signature = token_service.issue(claim).split(".")
        other = token_service.issue(IdentityClaim(id=8, name="x", email="x@example.com"))
        spliced = ".".join([header, other.split(".")[1], signature])

        with pytest.raises(TokenError):
            token_service.verify(spliced)

    def test_malformed_token_rejected(self, token_service):
        with pytest.raises(TokenError):
            token_service.verify("not-a-jwt")

    def test_token_without_identity_rejected(self, token_service):
        token = jwt.encode(
            {"sub": "7", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "unit-test-secret",
            algorithm="HS256",
        )

        with pytest.raises(TokenError):
            token_service.verify(token)

    def test_token_without_expiry_rejected(self, token_service, claim):
        token = jwt.encode({"user": claim.model_dump()}, "unit-test-secret", algorithm="HS256")

        with pytest.raises(TokenError):
            token_service.verify(token)

    def test_empty_secret_refused(self):
        with pytest.raises(ValueError):
            TokenService(secret_key="")

    def test_process_wide_service_uses_configured_secret(self, claim):
        service = get_token_service()
        token = service.issue(claim)

        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["user"]["id"] == 7
        assert get_token_service() is service
