from sqlalchemy import Column, String, Boolean, Text
from sqlalchemy.orm import relationship
from src.linkbio.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    bio = Column(Text, nullable=True)
    email_verified = Column(Boolean, default=False, nullable=False)

    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    sessions = relationship(
        "UserSession", back_populates="user", cascade="all, delete-orphan"
    )
    links = relationship("Link", back_populates="user", cascade="all, delete-orphan")
