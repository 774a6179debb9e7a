"""Password hashing and bearer token helpers."""

import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

import jwt

from diet_tracker.domain.errors import NotAuthorized

_HASH_ALGORITHM = "pbkdf2_sha256"
_HASH_ITERATIONS = 390_000
_JWT_ALGORITHM = "HS256"


def hash_password(password: str, *, iterations: int = _HASH_ITERATIONS) -> str:
    """Hash a password with a random salt."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return "$".join(
        [
            _HASH_ALGORITHM,
            str(iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(digest).decode("ascii"),
        ]
    )


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a stored hash."""
    try:
        algorithm, iterations, salt, expected = encoded.split("$", maxsplit=3)
    except ValueError:
        return False
    if algorithm != _HASH_ALGORITHM:
        return False
    try:
        rounds = int(iterations)
        salt_bytes = base64.b64decode(salt, validate=True)
        expected_bytes = base64.b64decode(expected, validate=True)
    except ValueError:
        return False
    if rounds <= 0:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt_bytes, rounds)
    return hmac.compare_digest(digest, expected_bytes)


@dataclass
class TokenService:
    """Issues and verifies signed bearer tokens."""

    secret: str
    ttl_days: int = 30

    def issue(self, user_id: UUID) -> str:
        """Return a signed token for the user."""
        now = datetime.now(tz=UTC)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(days=self.ttl_days),
        }
        return jwt.encode(payload, self.secret, algorithm=_JWT_ALGORITHM)

    def verify(self, token: str) -> UUID:
        """Return the user id in a token or raise NotAuthorized."""
        try:
            payload = jwt.decode(token, self.secret, algorithms=[_JWT_ALGORITHM])
            return UUID(str(payload["sub"]))
        except jwt.ExpiredSignatureError as exc:
            raise NotAuthorized("Not authorized, token expired") from exc
        except (jwt.InvalidTokenError, KeyError, ValueError) as exc:
            raise NotAuthorized("Not authorized, invalid token") from exc
