from datetime import timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.linkbio.core.config import settings
from src.linkbio.core.errors import AuthError
from src.linkbio.core.security import TokenIssuer, get_token_issuer
from src.linkbio.db.session import get_db
from src.linkbio.models.user import User
from src.linkbio.services.auth_service import AuthService
from src.linkbio.services.email_service import EmailSender, get_email_sender

bearer_scheme = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Token from ``Authorization: Bearer <token>``, or None when absent."""
    if credentials is None:
        return None
    return credentials.credentials


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
    mailer: EmailSender = Depends(get_email_sender),
) -> AuthService:
    return AuthService(
        db,
        tokens,
        mailer,
        access_token_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        reset_token_ttl=timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
        send_verification_email=settings.SEND_VERIFICATION_EMAIL,
    )


def get_current_user(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """
    Get the current authenticated user from the bearer token.

    Args:
        token: JWT token from authorization header
        auth_service: Auth service bound to the request's database session

    Returns:
        The authenticated user object

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired, or
            its user no longer exists
    """
    try:
        return auth_service.authenticate(token)
    except AuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
