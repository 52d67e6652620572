from sqlalchemy.orm import Session
from datetime import datetime, UTC
from typing import List, Optional

from src.linkbio.models.link import Link
from src.linkbio.schemas.link import LinkCreate, LinkUpdate


def create_link(db: Session, link_data: LinkCreate, user_id: int) -> Link:
    """
    Create a new outbound link for a user.

    Args:
        db: Database session
        link_data: Title and target URL
        user_id: Owner of the link

    Returns:
        Created link object
    """
    db_link = Link(title=link_data.title, url=str(link_data.url), user_id=user_id)
    db.add(db_link)
    db.commit()
    db.refresh(db_link)
    return db_link


def get_link_by_id(db: Session, link_id: int) -> Optional[Link]:
    return db.get(Link, link_id)


def get_links_by_user_id(db: Session, user_id: int) -> List[Link]:
    return (
        db.query(Link)
        .filter(Link.user_id == user_id)
        .order_by(Link.created_at.asc(), Link.id.asc())
        .all()
    )


def update_link(
    db: Session, link_id: int, user_id: int, link_data: LinkUpdate
) -> Optional[Link]:
    """
    Update a link owned by the given user.

    Args:
        db: Database session
        link_id: Link to update
        user_id: Requesting user; links of other users are treated as missing
        link_data: Fields to change

    Returns:
        Updated link object or None if not found
    """
    db_link = get_link_by_id(db, link_id)
    if not db_link or db_link.user_id != user_id:
        return None

    update_data = link_data.model_dump(exclude_unset=True)

    if "url" in update_data and update_data["url"] is not None:
        update_data["url"] = str(update_data["url"])

    for field, value in update_data.items():
        if value is not None:
            setattr(db_link, field, value)

    db.commit()
    db.refresh(db_link)
    return db_link


def delete_link(db: Session, link_id: int, user_id: int) -> bool:
    """
    Delete a link owned by the given user.

    Returns:
        True if deleted, False if not found
    """
    db_link = get_link_by_id(db, link_id)
    if not db_link or db_link.user_id != user_id:
        return False

    db.delete(db_link)
    db.commit()
    return True


def track_link_click(db: Session, link_id: int) -> Optional[Link]:
    """
    Increment the click counter for a link.

    Returns:
        Updated link object or None if not found
    """
    db_link = get_link_by_id(db, link_id)
    if not db_link:
        return None

    db_link.clicks = (db_link.clicks or 0) + 1
    db_link.last_clicked_at = datetime.now(UTC)
    db.commit()
    db.refresh(db_link)
    return db_link
