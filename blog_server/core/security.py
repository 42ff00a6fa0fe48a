# blog_server/core/security.py

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext


# -------------------------------
# Credential hashing
# -------------------------------

class PasswordHasher:
    """
    Salted bcrypt hashing with an adaptive cost factor.
    Secrets are SHA-256 prehashed so bytes past bcrypt's 72-byte limit still
    count. Plain bcrypt digests verify and are flagged deprecated.
    """

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt_sha256", "bcrypt"],
            deprecated="auto",
            bcrypt_sha256__rounds=rounds,
        )

    def hash(self, secret: str) -> str:
        return self._context.hash(secret)

    def verify(self, secret: str, digest: str) -> bool:
        # A digest passlib cannot identify raises ValueError: that is a
        # corrupted row, not a wrong password.
        return self._context.verify(secret, digest)


# -------------------------------
# Session tokens
# -------------------------------

class TokenStatus(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class TokenCheck:
    status: TokenStatus
    claims: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.VALID


class AuthError(Exception):
    """Base class for bearer-credential failures."""


class Unauthenticated(AuthError):
    """No bearer token was presented."""


class InvalidToken(AuthError):
    """A token was presented but is tampered, unparseable or expired."""

    def __init__(self, status: TokenStatus):
        super().__init__(f"token rejected: {status.value}")
        self.status = status


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCodec:
    """
    Issues and verifies self-contained HS256 session tokens.

    Every token carries the caller's claims plus `iat` and `exp` (epoch seconds).
    `clock` returns an aware datetime and exists so expiry can be tested.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=20),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("token secret must not be blank")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl
        self._clock = clock or _utcnow

    def issue(self, claims: Dict[str, Any]) -> str:
        now = self._clock()
        to_encode = dict(claims)
        to_encode.update({
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        })
        return jwt.encode(to_encode, self._secret, algorithm=self._algorithm)

    def verify(self, token: Optional[str]) -> TokenCheck:
        if not token:
            return TokenCheck(TokenStatus.MALFORMED)

        # Signature and structure first; expiry is judged against our own clock.
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False, "verify_iat": False},
            )
        except JWTError:
            return TokenCheck(TokenStatus.MALFORMED)

        exp = claims.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            return TokenCheck(TokenStatus.MALFORMED)
        if self._clock().timestamp() >= exp:
            return TokenCheck(TokenStatus.EXPIRED)

        return TokenCheck(TokenStatus.VALID, claims)

    def decode(self, token: Optional[str]) -> Dict[str, Any]:
        check = self.verify(token)
        if not check.ok:
            raise InvalidToken(check.status)
        return check.claims


# -------------------------------
# Principal
# -------------------------------

@dataclass(frozen=True)
class Principal:
    """The authenticated identity for the duration of one request."""
    id: int
    email: str

    def to_claims(self) -> Dict[str, Any]:
        return {"id": self.id, "email": self.email}

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "Principal":
        try:
            return cls(id=int(claims["id"]), email=str(claims["email"]))
        except (KeyError, TypeError, ValueError):
            raise InvalidToken(TokenStatus.MALFORMED)
