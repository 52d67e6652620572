from sqlalchemy import Column, String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from src.linkbio.db.base import BaseModel


class Link(BaseModel):
    __tablename__ = "links"

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)
    clicks = Column(Integer, default=0, nullable=False)
    last_clicked_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="links")
