from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from core.config import settings
from core.exceptions import TokenError, TokenExpiredError
from schemas.auth_schema import IdentityClaim

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Salted bcrypt hash, cost from BCRYPT_ROUNDS unless given"""
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against a stored bcrypt hash"""
    password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens.

    Verification is stateless: the credential store is never consulted, so a
    token stays valid until it expires even if its user is gone. Callers get
    the service through ``get_token_service`` so a revocation-aware
    implementation can replace this one without touching them.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expires_minutes: int = 60):
        if not secret_key:
            raise ValueError("Token signing key must not be empty")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = timedelta(minutes=expires_minutes)

    def issue(self, claim: IdentityClaim, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)
        payload: Dict[str, Any] = {
            "sub": str(claim.id),
            "user": claim.model_dump(),
            "iat": now,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> IdentityClaim:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError:
            raise TokenError()

        if "exp" not in payload:
            raise TokenError("Token has no expiry")
        try:
            return IdentityClaim.model_validate(payload.get("user"))
        except PydanticValidationError:
            raise TokenError("Token carries no identity")


_token_service: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """Process-wide token service built from settings"""
    global _token_service
    if _token_service is None:
        _token_service = TokenService(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expires_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )
    return _token_service
