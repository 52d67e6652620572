from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProfileBase(BaseModel):
    theme: Optional[str] = None
    background_color: Optional[str] = None
    font_color: Optional[str] = None
    font_family: Optional[str] = None
    button_style: Optional[str] = None
    background_image: Optional[str] = None
    logo: Optional[str] = None
    gradient_enabled: Optional[bool] = None
    gradient_start_color: Optional[str] = None
    gradient_end_color: Optional[str] = None
    gradient_direction: Optional[str] = None


class ProfileUpdate(ProfileBase):
    pass


class Profile(ProfileBase):
    id: int
    user_id: int
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


PROFILE_FIELDS = tuple(ProfileBase.model_fields)
