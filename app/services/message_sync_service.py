"""
Persists authors, posts, messages and attachments from message events.

Messages and attachments are immutable: a replayed event is a no-op.
Authors and post titles are refreshed on every event.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import MessageSyncError
from app.infra.logging_config import get_logger
from app.models.message import Attachment, Message
from app.models.post import Post
from app.models.user import User
from app.schemas.forum_event import (
    ForumThreadChannel,
    InboundAuthor,
    InboundMessage,
)
from app.utils.db.upsert import insert_or_update

logger = get_logger("messages")


class MessageSyncService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def sync_message(
        self,
        thread: ForumThreadChannel,
        message: InboundMessage,
        author: InboundAuthor,
    ) -> bool:
        """
        Store a message posted in a forum thread, together with its author,
        its post and its attachments. Returns False when the thread's parent
        is not a text or forum channel.

        The parent channel must already be synced. A bare parent id and kind
        are enough to place the message.
        """
        channel_id = thread.mirrored_parent_id
        if channel_id is None:
            logger.debug("Skipping message %s outside a forum thread", message.id)
            return False

        try:
            self._upsert_user(author)
            self._upsert_post(thread, channel_id, message, author)
            self._insert_message(thread.id, message, author.id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise MessageSyncError(f"Failed to sync message {message.id}: {e}") from e

        logger.debug("Synced message %s in post %s", message.id, thread.id)
        return True

    def _upsert_user(self, author: InboundAuthor) -> None:
        insert_or_update(
            self.db,
            User,
            key="id",
            values={
                "id": author.id,
                "username": author.username,
                "avatar_url": author.avatar_url,
            },
            update_fields=["username", "avatar_url"],
        )

    def _upsert_post(
        self,
        thread: ForumThreadChannel,
        channel_id: str,
        message: InboundMessage,
        author: InboundAuthor,
    ) -> None:
        is_root = message.id == thread.id
        values = {
            "id": thread.id,
            "title": thread.name,
            "channel_id": channel_id,
            "user_id": thread.owner_id or (author.id if is_root else None),
        }
        update_fields = ["title"]
        # The root may arrive after its replies; it fixes author and creation time
        if values["user_id"] is not None:
            update_fields.append("user_id")
        if is_root:
            values["created_at"] = message.created_at
            update_fields.append("created_at")
        insert_or_update(
            self.db, Post, key="id", values=values, update_fields=update_fields
        )

    def _insert_message(
        self, post_id: str, message: InboundMessage, author_id: str
    ) -> None:
        insert_or_update(
            self.db,
            Message,
            key="id",
            values={
                "id": message.id,
                "post_id": post_id,
                "user_id": author_id,
                "content": message.content,
                "reply_to_message_id": message.reply_to_message_id,
                "created_at": message.created_at,
            },
        )
        for attachment in message.attachments:
            insert_or_update(
                self.db,
                Attachment,
                key="id",
                values={
                    "id": attachment.id,
                    "message_id": message.id,
                    "url": attachment.url,
                    "name": attachment.name,
                    "content_type": attachment.content_type,
                },
            )
