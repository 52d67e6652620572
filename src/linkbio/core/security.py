from datetime import datetime, timedelta, UTC
from typing import Optional, Tuple
import uuid

from jose import jwt, JWTError
from passlib.context import CryptContext

from src.linkbio.core.config import settings

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)


class InvalidTokenError(Exception):
    """Raised when a token is malformed, tampered with or expired."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password to compare against

    Returns:
        True if passwords match, False otherwise (including malformed hashes)
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password for storage.

    Every call uses a fresh random salt, so hashing the same password
    twice yields different digests.

    Args:
        password: Plain text password

    Returns:
        Hashed password
    """
    return pwd_context.hash(password)


class TokenIssuer:
    """
    Signs and verifies JWTs with a single shared secret.

    Tokens carry the user id as ``sub``, an ``exp`` and ``iat`` timestamp,
    and a random ``jti`` so that two tokens issued for the same user in the
    same second are still distinct.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    def sign(self, claims: dict, expires_delta: timedelta) -> Tuple[str, datetime]:
        """
        Create a signed token.

        Args:
            claims: Claims to encode in the token
            expires_delta: How long the token stays valid

        Returns:
            Tuple of the encoded token and its expiry instant
        """
        now = datetime.now(UTC)
        expire = now + expires_delta
        to_encode = claims.copy()
        to_encode.update({"exp": expire, "iat": now, "jti": uuid.uuid4().hex})
        token = jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)
        return token, expire

    def sign_for_user(self, user_id: int, expires_delta: timedelta) -> Tuple[str, datetime]:
        return self.sign({"sub": str(user_id)}, expires_delta)

    def verify(self, token: Optional[str]) -> dict:
        """
        Decode a token and check its signature and expiry.

        Args:
            token: Encoded token

        Returns:
            The decoded claims

        Raises:
            InvalidTokenError: If the token is malformed, badly signed,
                expired, or has no subject
        """
        if not token:
            raise InvalidTokenError("Token is missing")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidTokenError(str(e)) from e

        if payload.get("sub") is None:
            raise InvalidTokenError("Token has no subject claim")
        return payload

    def user_id_from(self, token: Optional[str]) -> int:
        """Verify a token and return the user id it was issued for."""
        payload = self.verify(token)
        try:
            return int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Token subject is not a user id") from e


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(settings.SECRET_KEY, settings.ALGORITHM)
