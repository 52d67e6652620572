from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from src.linkbio.db.base import BaseModel


class UserSession(BaseModel):
    """Server-side record of an issued token. Not consulted when verifying tokens."""

    __tablename__ = "sessions"

    token = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    expires_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")
