"""Channel model: one row per mirrored text or forum channel."""

from __future__ import annotations

from sqlalchemy import Column, String, Text

from app.db import Base
from app.models.mixins import TimestampMixin


class Channel(Base, TimestampMixin):
    """
    Mirrored channel keyed by its platform snowflake id.

    ``id`` and ``kind`` are fixed at first write; ``name`` and ``topic`` track
    the latest synced event.
    """

    __tablename__ = "channels"

    id = Column(String(32), primary_key=True)
    name = Column(String(256), nullable=False)
    kind = Column(String(32), nullable=False)  # 'text' | 'forum' | 'forum_thread'
    topic = Column(Text, nullable=True)
