from sqlalchemy import Column, String, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from src.linkbio.db.base import BaseModel


class Profile(BaseModel):
    __tablename__ = "profiles"

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    theme = Column(String, default="light")
    background_color = Column(String, default="#ffffff")
    font_color = Column(String, default="#000000")
    font_family = Column(String, default="Arial")
    button_style = Column(String, default="rounded")
    background_image = Column(String, nullable=True)
    logo = Column(String, nullable=True)
    gradient_enabled = Column(Boolean, default=False)
    gradient_start_color = Column(String, default="#ffffff")
    gradient_end_color = Column(String, default="#000000")
    gradient_direction = Column(String, default="to bottom")

    user = relationship("User", back_populates="profile")
