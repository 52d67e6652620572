from pydantic import BaseModel, HttpUrl
from typing import Optional
from datetime import datetime


class LinkBase(BaseModel):
    title: str
    url: HttpUrl


class LinkCreate(LinkBase):
    pass


class LinkUpdate(BaseModel):
    title: Optional[str] = None
    url: Optional[HttpUrl] = None


class Link(BaseModel):
    id: int
    user_id: int
    title: str
    url: str
    clicks: int
    last_clicked_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class LinkClick(BaseModel):
    id: int
    url: str
    clicks: int

    class Config:
        from_attributes = True
