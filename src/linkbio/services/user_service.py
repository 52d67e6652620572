from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Optional

from src.linkbio.core.config import logger
from src.linkbio.core.errors import ConflictError, NotFoundError
from src.linkbio.models.user import User
from src.linkbio.services import session_service


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """
    Get user by email, ignoring case.

    Args:
        db: Database session
        email: Email to look up

    Returns:
        User object if found, None otherwise
    """
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """
    Get user by username.

    Args:
        db: Database session
        username: Username to look up

    Returns:
        User object if found, None otherwise
    """
    return db.query(User).filter(User.username == username).first()


def get_user_by_email_or_username(db: Session, identifier: str) -> Optional[User]:
    """
    Get user whose email (case-insensitive) or username equals the identifier.

    An email match wins over a username match.
    """
    users = (
        db.query(User)
        .filter(
            or_(
                func.lower(User.email) == identifier.lower(),
                User.username == identifier,
            )
        )
        .all()
    )
    for user in users:
        if user.email.lower() == identifier.lower():
            return user
    return users[0] if users else None


def create_user(
    db: Session, username: str, email: str, hashed_password: str, commit: bool = True
) -> User:
    """
    Create a new user.

    With commit=False the row is only flushed, so the caller can add
    dependent rows and commit them together.

    Args:
        db: Database session
        username: Unique username
        email: Unique email
        hashed_password: Already hashed password
        commit: Commit the transaction, or only flush it

    Returns:
        Created user object

    Raises:
        ConflictError: If email already registered or username already taken
    """
    if get_user_by_email(db, email):
        raise ConflictError("Email already registered")
    if get_user_by_username(db, username):
        raise ConflictError("Username already taken")

    db_user = User(email=email, username=username, hashed_password=hashed_password)
    db.add(db_user)
    try:
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError:
        # a concurrent registration won the unique constraint
        db.rollback()
        raise ConflictError("Email or username already registered")
    if commit:
        db.refresh(db_user)
    return db_user


def update_user(db: Session, user: User, update_data: dict) -> User:
    """
    Update account fields (username, email, bio).

    Args:
        db: Database session
        user: User object to update
        update_data: Fields to change; None clears bio and is ignored for
            username and email, which cannot be empty

    Returns:
        Updated user object

    Raises:
        ConflictError: If the new email or username belongs to another user
    """
    update_data = {
        field: value
        for field, value in update_data.items()
        if field == "bio" or (field in ("username", "email") and value is not None)
    }

    new_email = update_data.get("email")
    if new_email and new_email != user.email:
        other = get_user_by_email(db, new_email)
        if other and other.id != user.id:
            raise ConflictError("Email already registered")

    new_username = update_data.get("username")
    if new_username and new_username != user.username:
        other = get_user_by_username(db, new_username)
        if other and other.id != user.id:
            raise ConflictError("Username already taken")

    for field, value in update_data.items():
        setattr(user, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email or username already registered")
    db.refresh(user)
    return user


def update_user_password(db: Session, user_id: int, hashed_password: str) -> bool:
    """
    Replace a user's password hash.

    Returns:
        True if updated, False if the user does not exist
    """
    user = get_user_by_id(db, user_id)
    if not user:
        return False

    user.hashed_password = hashed_password
    db.commit()
    return True


def verify_email(db: Session, user_id: int) -> bool:
    """
    Mark a user's email as verified. Verification is never undone.

    Returns:
        True if the user exists, False otherwise
    """
    user = get_user_by_id(db, user_id)
    if not user:
        return False

    if not user.email_verified:
        user.email_verified = True
        db.commit()
    return True


def delete_user(db: Session, user_id: int) -> None:
    """
    Delete a user. Profile, sessions and links go with it.

    Raises:
        NotFoundError: If the user does not exist
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    tokens = [row.token for row in session_service.get_sessions_for_user(db, user_id)]

    db.delete(user)
    db.commit()
    session_service.forget_user_sessions(user_id, tokens)
    logger.info(f"Deleted user {user_id} and dependent records")
