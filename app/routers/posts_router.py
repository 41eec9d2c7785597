"""Posts API: the assembled question/answer view of one forum post."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.db import get_db
from app.schemas.thread import PostThreadView
from app.services.thread_service import ThreadService

posts_router = APIRouter(prefix="/posts", tags=["Post"])


@posts_router.get("/{post_id}", response_model=PostThreadView)
def get_post_thread(
    post_id: str,
    db: Session = Depends(get_db),
) -> PostThreadView:
    """Get a post with its replies grouped by author and replies resolved."""
    view = ThreadService(db).get_thread_view(post_id)
    if view is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return view
