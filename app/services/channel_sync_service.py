"""Idempotent channel upserts driven by inbound channel events."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.dedup_cache import DedupCache
from app.exceptions import ChannelSyncError
from app.infra.logging_config import get_logger
from app.models.channel import Channel
from app.schemas.forum_event import (
    AnyChannel,
    ForumChannel,
    ForumThreadChannel,
    TextChannel,
)
from app.utils.db.upsert import insert_or_update

logger = get_logger("channels")


class ChannelSyncService:
    """
    Mirrors text and forum channels into the ``channels`` table.

    The dedup cache skips channels already written by this process. Two
    callers racing on a new id both write; the upsert collapses them into
    one row.
    """

    def __init__(self, db: Session, cache: DedupCache) -> None:
        self.db = db
        self.cache = cache

    def sync_channel(self, channel: AnyChannel) -> bool:
        """
        Upsert a text or forum channel. Returns True if a write was issued.

        Other channel kinds are ignored. Raises ChannelSyncError if the store
        rejects the write; the cache is left untouched in that case.
        """
        if not isinstance(channel, (TextChannel, ForumChannel)):
            return False
        if self.cache.has(channel.id):
            return False

        try:
            insert_or_update(
                self.db,
                Channel,
                key="id",
                values={
                    "id": channel.id,
                    "name": channel.name,
                    "kind": channel.kind.value,
                    "topic": channel.topic,
                },
                update_fields=["name", "topic"],
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ChannelSyncError(f"Failed to sync channel {channel.id}: {e}") from e

        self.cache.mark(channel.id)
        logger.info("Synced channel (#%s)", channel.name)
        return True

    def sync_from_message_context(self, channel: AnyChannel) -> bool:
        """
        Sync the parent of a forum thread a message was posted in.

        Only threads whose parent is a text or forum channel qualify; every
        other context is a no-op.
        """
        if not isinstance(channel, ForumThreadChannel):
            return False
        if not isinstance(channel.parent, (TextChannel, ForumChannel)):
            return False
        return self.sync_channel(channel.parent)

    def get_channel(self, channel_id: str) -> Channel | None:
        return self.db.query(Channel).filter(Channel.id == channel_id).first()
