from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from src.linkbio.api.deps import (
    get_auth_service,
    get_bearer_token,
    get_current_user,
    get_db,
)
from src.linkbio.core.errors import AuthError, ConflictError, NotFoundError
from src.linkbio.models.user import User as UserModel
from src.linkbio.schemas.profile import PROFILE_FIELDS
from src.linkbio.schemas.user import (
    LoginResponse,
    Message,
    PasswordResetRequest,
    PasswordUpdate,
    PublicUserWithProfile,
    RefreshRequest,
    RegisterResponse,
    Token,
    User,
    UserCreate,
    UserLogin,
    UserMeUpdate,
    UserWithProfile,
)
from src.linkbio.services.auth_service import AuthService
from src.linkbio.services.profile_service import (
    get_profile_by_user_id,
    update_profile_by_user_id,
)
from src.linkbio.services.user_service import (
    get_user_by_id,
    get_user_by_username,
    update_user,
)

router = APIRouter()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    Creates the user, a default profile and a first session; returns its token.
    """
    try:
        token = auth_service.register(user.username, user.email, user.password)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"message": "User created successfully", "token": token}


@router.post("/login", response_model=LoginResponse)
def login(credentials: UserLogin, auth_service: AuthService = Depends(get_auth_service)):
    """
    Login with username or email and password.

    Returns a JWT for use in authenticating subsequent requests.
    """
    try:
        token, user = auth_service.login(credentials.email_or_username, credentials.password)
    except AuthError as e:
        raise _unauthorized(e.message)
    return {"token": token, "user": user}


@router.post("/logout", response_model=Message)
def logout(
    token: Optional[str] = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Logout by deleting the session row of the presented token.

    The token itself is optional; without one this is a no-op.
    """
    auth_service.logout(token)
    return {"message": "Logged out successfully"}


@router.post("/refresh", response_model=Token)
def refresh(body: RefreshRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Exchange a valid token for a fresh one."""
    try:
        return {"token": auth_service.refresh(body.token)}
    except AuthError as e:
        raise _unauthorized(e.message)


@router.post("/reset-password", response_model=Message)
def reset_password(
    body: PasswordResetRequest, auth_service: AuthService = Depends(get_auth_service)
):
    """Send a password reset email containing a one-hour token."""
    try:
        auth_service.request_password_reset(body.email)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return {"message": "Password reset email sent"}


@router.post("/update-password", response_model=Message)
def update_password(
    body: PasswordUpdate, auth_service: AuthService = Depends(get_auth_service)
):
    """Consume a reset token and set a new password."""
    try:
        auth_service.update_password(body.token, body.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"message": "Password updated successfully"}


@router.get("/verify/{token}", response_model=Message)
def verify_email(token: str, auth_service: AuthService = Depends(get_auth_service)):
    try:
        auth_service.verify_email(token)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return {"message": "Email verified successfully"}


@router.get("/me", response_model=UserWithProfile)
def read_users_me(
    current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    Get current authenticated user with their styling profile.

    Requires authentication.
    """
    return {"user": current_user, "profile": get_profile_by_user_id(db, current_user.id)}


@router.put("/me", response_model=Message)
def update_users_me(
    user_update: UserMeUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update account fields (username, email, bio) and profile fields together.

    Requires authentication.
    """
    update_data = user_update.model_dump(exclude_unset=True)
    try:
        update_user(db, current_user, update_data)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    profile_data = {
        field: value for field, value in update_data.items() if field in PROFILE_FIELDS
    }
    if profile_data:
        update_profile_by_user_id(db, current_user.id, profile_data)
    return {"message": "Profile updated successfully"}


@router.delete("/me", response_model=Message)
def delete_users_me(
    current_user: UserModel = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Delete the current account with its profile, sessions and links.

    Requires authentication.
    """
    try:
        auth_service.delete_account(current_user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return {"message": "Account deleted successfully"}


@router.get("/by-username/{username}", response_model=PublicUserWithProfile)
def read_user_by_username(username: str, db: Session = Depends(get_db)):
    """Public lookup of a user and their styling profile."""
    user = get_user_by_username(db, username)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return {"user": user, "profile": get_profile_by_user_id(db, user.id)}


@router.get("/{user_id}", response_model=User)
def read_user(user_id: int, db: Session = Depends(get_db)):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
