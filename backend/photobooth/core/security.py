"""Admin Credentials — bcrypt password hashing and signed JWT session tokens.

Invariants:
    - Passwords are hashed with bcrypt (salted, cost from bcrypt.gensalt())
    - Tokens carry sub (admin id), email, iat, exp; exp is mandatory on decode
    - Every decode failure surfaces as AuthenticationError (never a raw jwt exception)

Design Decisions:
    - One signed token replaces the cookie/localStorage/sessionStorage token triad:
      the same JWT is set as an HttpOnly cookie for the admin panel and accepted as
      a Bearer token by the mosaic app (ADR: stateless, no server-side session table)
    - bcrypt used directly instead of passlib: passlib is unmaintained and breaks on
      bcrypt >= 4.1
    - Secret and algorithm are arguments: core stays free of settings imports
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from photobooth.core.errors import AuthenticationError

MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its hash. Malformed hashes never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(
    subject: str,
    email: str,
    secret: str,
    algorithm: str = "HS256",
    expires_in: timedelta = timedelta(days=7),
    now: datetime | None = None,
) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "email": email,
        "iat": issued,
        "exp": issued + expires_in,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> dict:
    try:
        return jwt.decode(
            token, secret, algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid session token")
