"""
Password hashing and access tokens.

Passwords are hashed with Argon2; access tokens are HS256 JWTs signed with
JWT_SECRET and valid for JWT_EXPIRY_HOURS.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from config import settings
from services.exceptions import AuthenticationError

JWT_ALGORITHM = "HS256"
JWT_ISSUER = "storefront-api"
ADMIN_ROLE = "admin"

_password_hasher = PasswordHasher()


@dataclass(frozen=True)
class TokenPayload:
    user_id: int
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    secret: Optional[str] = None,
    expiry_hours: Optional[int] = None,
) -> str:
    """Sign a token carrying the user's id, name and role."""
    now = datetime.now(timezone.utc)
    hours = expiry_hours if expiry_hours is not None else settings.JWT_EXPIRY_HOURS
    payload = {
        "user_id": user_id,
        "username": username,
        "role": role,
        "sub": username,
        "iss": JWT_ISSUER,
        "iat": int(now.timestamp()),
        "nbf": int(now.timestamp()),
        "exp": int((now + timedelta(hours=hours)).timestamp()),
    }
    return jwt.encode(payload, secret or settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: Optional[str] = None) -> TokenPayload:
    """
    Validate signature, expiry and issuer.

    Raises:
        AuthenticationError: token is expired, forged or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    user_id = payload.get("user_id")
    username = payload.get("username")
    role = payload.get("role")
    if not isinstance(user_id, int) or not username or not role:
        raise AuthenticationError("Invalid token")

    return TokenPayload(user_id=user_id, username=username, role=role)
