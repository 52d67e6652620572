from sqlalchemy.orm import Session
from typing import Optional

from src.linkbio.models.profile import Profile
from src.linkbio.schemas.profile import PROFILE_FIELDS


def create_profile(db: Session, user_id: int, commit: bool = True) -> Profile:
    """Create the default styling profile for a freshly registered user."""
    db_profile = Profile(user_id=user_id)
    db.add(db_profile)
    if commit:
        db.commit()
        db.refresh(db_profile)
    else:
        db.flush()
    return db_profile


def get_profile_by_user_id(db: Session, user_id: int) -> Optional[Profile]:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def update_profile_by_user_id(
    db: Session, user_id: int, update_data: dict
) -> Optional[Profile]:
    """
    Update styling fields of a user's profile.

    Args:
        db: Database session
        user_id: Owner of the profile
        update_data: Fields to change; unknown keys are ignored

    Returns:
        Updated profile or None if the user has no profile
    """
    db_profile = get_profile_by_user_id(db, user_id)
    if not db_profile:
        return None

    for field, value in update_data.items():
        if field in PROFILE_FIELDS:
            setattr(db_profile, field, value)

    db.commit()
    db.refresh(db_profile)
    return db_profile
