from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.linkbio.api.deps import get_current_user, get_db
from src.linkbio.models.user import User
from src.linkbio.schemas.profile import Profile, ProfileUpdate
from src.linkbio.services.profile_service import (
    get_profile_by_user_id,
    update_profile_by_user_id,
)

router = APIRouter()


@router.get("", response_model=Profile)
def read_own_profile(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """
    Get the styling profile of the current user.

    Requires authentication.
    """
    profile = get_profile_by_user_id(db, current_user.id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.put("", response_model=Profile)
def update_own_profile(
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update theme, colors, fonts, images and gradient settings.

    Only fields present in the request body change. Requires authentication.
    """
    profile = update_profile_by_user_id(
        db, current_user.id, profile_update.model_dump(exclude_unset=True)
    )
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.get("/{user_id}", response_model=Profile)
def read_profile(user_id: int, db: Session = Depends(get_db)):
    """Public lookup of a user's styling profile."""
    profile = get_profile_by_user_id(db, user_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile
