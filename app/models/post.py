"""Post model: a forum thread, identified by its root message id."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String

from app.db import Base


class Post(Base):
    """
    One row per forum thread. ``id`` equals the root message id.

    ``answer_id`` is written by moderation tooling outside this service and
    may point at a message that has since been deleted.
    """

    __tablename__ = "posts"

    id = Column(String(32), primary_key=True)
    title = Column(String(512), nullable=False)
    channel_id = Column(
        String(32), ForeignKey("channels.id"), nullable=False, index=True
    )
    user_id = Column(String(32), nullable=True, index=True)
    answer_id = Column(String(32), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
