from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.linkbio.api.deps import get_current_user, get_db
from src.linkbio.schemas.link import Link, LinkClick, LinkCreate, LinkUpdate
from src.linkbio.services.link_service import (
    create_link,
    delete_link,
    get_link_by_id,
    get_links_by_user_id,
    track_link_click,
    update_link,
)

router = APIRouter()


@router.post("", response_model=Link, status_code=status.HTTP_201_CREATED)
def add_link(
    link: LinkCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    Add an outbound link to the current user's page.

    Requires authentication.
    """
    return create_link(db, link, current_user.id)


@router.get("", response_model=list[Link])
def read_own_links(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    List the current user's links.

    Requires authentication.
    """
    return get_links_by_user_id(db, current_user.id)


@router.get("/user/{user_id}", response_model=list[Link])
def read_user_links(user_id: int, db: Session = Depends(get_db)):
    """
    List a user's links.

    Does not require authentication.
    """
    return get_links_by_user_id(db, user_id)


@router.get("/{link_id}", response_model=Link)
def read_link(link_id: int, db: Session = Depends(get_db)):
    link = get_link_by_id(db, link_id)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return link


@router.put("/{link_id}", response_model=Link)
def edit_link(
    link_id: int,
    link_update: LinkUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    Update one of the current user's links.

    Requires authentication.
    """
    link = update_link(db, link_id, current_user.id, link_update)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return link


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_link(
    link_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    Delete one of the current user's links.

    Requires authentication.
    """
    if not delete_link(db, link_id, current_user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")


@router.post("/{link_id}/click", response_model=LinkClick)
def click_link(link_id: int, db: Session = Depends(get_db)):
    """
    Record a click on a link and return its target.

    Does not require authentication.
    """
    link = track_link_click(db, link_id)
    if not link:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    return link
