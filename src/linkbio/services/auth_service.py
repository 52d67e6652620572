"""
Authentication and session lifecycle.

``AuthService`` composes the credential, profile and session stores with the
password hasher, token issuer and email sender. It is built per request with
all of its collaborators passed in, so tests can hand it fakes and a fixed
secret.

Known gaps kept on purpose:

* Tokens are checked by signature and expiry only. Deleting a session row
  (logout) does not stop a still-unexpired token from authenticating.
* Password updates and account deletion leave outstanding tokens alone.
* Reset and verification tokens have the same shape as auth tokens.
"""

from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.linkbio.core.config import logger
from src.linkbio.core.errors import AuthError, NotFoundError, ServerError
from src.linkbio.core.security import (
    InvalidTokenError,
    TokenIssuer,
    get_password_hash,
    verify_password,
)
from src.linkbio.models.user import User
from src.linkbio.services import profile_service, session_service, user_service
from src.linkbio.services.email_service import EmailSender

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_OR_EXPIRED_TOKEN = "Invalid or expired token"


class AuthService:
    def __init__(
        self,
        db: Session,
        tokens: TokenIssuer,
        mailer: EmailSender,
        access_token_ttl: timedelta = timedelta(hours=24),
        reset_token_ttl: timedelta = timedelta(hours=1),
        send_verification_email: bool = False,
    ):
        self.db = db
        self.tokens = tokens
        self.mailer = mailer
        self.access_token_ttl = access_token_ttl
        self.reset_token_ttl = reset_token_ttl
        self.send_verification_email = send_verification_email

    def _issue_session_token(self, user_id: int) -> str:
        token, expires_at = self.tokens.sign_for_user(user_id, self.access_token_ttl)
        session_service.create_session(self.db, user_id, token, expires_at)
        return token

    def register(self, username: str, email: str, password: str) -> str:
        """
        Create a user with a default profile and an initial session.

        Args:
            username: Unique username
            email: Unique email
            password: Plain text password

        Returns:
            A 24-hour token for the new user

        Raises:
            ConflictError: If the email or username is taken
        """
        hashed_password = get_password_hash(password)
        # user and profile are only flushed; the session insert commits all three
        user = user_service.create_user(
            self.db, username, email, hashed_password, commit=False
        )
        try:
            profile_service.create_profile(self.db, user.id, commit=False)
            token = self._issue_session_token(user.id)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.info(f"Registered user {user.id} ({user.username})")

        if self.send_verification_email:
            verify_token, _ = self.tokens.sign_for_user(user.id, self.access_token_ttl)
            if not self.mailer.send_verification_email(user.email, verify_token):
                logger.warning(f"Verification email for user {user.id} was not sent")

        return token

    def login(self, email_or_username: str, password: str) -> Tuple[str, User]:
        """
        Check credentials and open a new session.

        Earlier sessions of the same user stay valid.

        Raises:
            AuthError: "Invalid credentials" for an unknown identifier and
                for a wrong password alike
        """
        user = user_service.get_user_by_email_or_username(self.db, email_or_username)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Failed login attempt")
            raise AuthError(INVALID_CREDENTIALS)

        token = self._issue_session_token(user.id)
        logger.info(f"User {user.id} logged in")
        return token, user

    def logout(self, token: Optional[str]) -> None:
        """Delete the session row for the token. Missing or unknown tokens are a no-op."""
        if not token:
            return
        if session_service.delete_session(self.db, token):
            logger.info("Session deleted on logout")

    def refresh(self, old_token: str) -> str:
        """
        Exchange a valid token for a new 24-hour token.

        The old token's session row is left in place.

        Raises:
            AuthError: If the token is invalid or expired, or its user is gone
        """
        try:
            user_id = self.tokens.user_id_from(old_token)
        except InvalidTokenError as e:
            logger.warning(f"Refresh rejected: {e}")
            raise AuthError(INVALID_OR_EXPIRED_TOKEN)

        user = user_service.get_user_by_id(self.db, user_id)
        if not user:
            raise AuthError("Invalid token")

        token = self._issue_session_token(user.id)
        logger.info(f"Token refreshed for user {user.id}")
        return token

    def request_password_reset(self, email: str) -> None:
        """
        Email a one-hour reset token. No session row is created for it.

        Raises:
            NotFoundError: If no user has this email
            ServerError: If the email could not be sent
        """
        user = user_service.get_user_by_email(self.db, email)
        if not user:
            raise NotFoundError("User not found")

        reset_token, _ = self.tokens.sign_for_user(user.id, self.reset_token_ttl)
        if not self.mailer.send_reset_password_email(user.email, reset_token):
            raise ServerError("Failed to send password reset email")
        logger.info(f"Password reset requested for user {user.id}")

    def update_password(self, reset_token: str, new_password: str) -> None:
        """
        Set a new password using a reset token.

        Raises:
            AuthError: If the token is invalid or expired, or its user is gone
        """
        try:
            user_id = self.tokens.user_id_from(reset_token)
        except InvalidTokenError as e:
            logger.warning(f"Password update rejected: {e}")
            raise AuthError(INVALID_OR_EXPIRED_TOKEN)

        hashed_password = get_password_hash(new_password)
        if not user_service.update_user_password(self.db, user_id, hashed_password):
            raise AuthError(INVALID_OR_EXPIRED_TOKEN)
        logger.info(f"Password updated for user {user_id}")

    def verify_email(self, verify_token: str) -> None:
        """
        Mark the token's user as email-verified.

        Raises:
            AuthError: If the token is invalid or expired, or its user is gone
        """
        try:
            user_id = self.tokens.user_id_from(verify_token)
        except InvalidTokenError as e:
            logger.warning(f"Email verification rejected: {e}")
            raise AuthError(INVALID_OR_EXPIRED_TOKEN)

        if not user_service.verify_email(self.db, user_id):
            raise AuthError(INVALID_OR_EXPIRED_TOKEN)
        logger.info(f"Email verified for user {user_id}")

    def delete_account(self, user_id: int) -> None:
        user_service.delete_user(self.db, user_id)

    def authenticate(self, token: Optional[str]) -> User:
        """
        Resolve a bearer token to its user.

        Only the signature, expiry and user existence are checked; the
        session table is not consulted.

        Raises:
            AuthError: If the token does not identify an existing user
        """
        try:
            user_id = self.tokens.user_id_from(token)
        except InvalidTokenError as e:
            logger.warning(f"JWT validation error: {e}")
            raise AuthError("Could not validate credentials")

        user = user_service.get_user_by_id(self.db, user_id)
        if user is None:
            logger.warning(f"User not found: {user_id}")
            raise AuthError("Could not validate credentials")
        return user
