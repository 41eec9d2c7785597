"""Loads a post's messages from the store and assembles the thread view."""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.core.thread_assembler import assemble_thread
from app.models.channel import Channel
from app.models.message import Message
from app.models.post import Post
from app.models.user import User
from app.schemas.thread import (
    PostSummary,
    PostThreadView,
    ThreadAttachment,
    ThreadAuthor,
    ThreadMessage,
)


def _to_author(user_id: str, user: Optional[User]) -> ThreadAuthor:
    if user is None:
        return ThreadAuthor(id=user_id)
    return ThreadAuthor(id=user.id, username=user.username, avatar_url=user.avatar_url)


def _to_thread_message(message: Message, user: Optional[User]) -> ThreadMessage:
    return ThreadMessage(
        id=message.id,
        author=_to_author(message.user_id, user),
        content=message.content or "",
        created_at=message.created_at,
        reply_to_message_id=message.reply_to_message_id,
        attachments=[ThreadAttachment.model_validate(a) for a in message.attachments],
    )


class ThreadService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_post_summary(self, post_id: str) -> Optional[PostSummary]:
        row: Optional[Tuple[Post, Optional[User], Optional[Channel]]] = (
            self.db.query(Post, User, Channel)
            .outerjoin(User, User.id == Post.user_id)
            .outerjoin(Channel, Channel.id == Post.channel_id)
            .filter(Post.id == post_id)
            .first()
        )
        if row is None:
            return None
        post, user, channel = row
        return PostSummary(
            id=post.id,
            title=post.title,
            created_at=post.created_at,
            answer_id=post.answer_id,
            channel_id=post.channel_id,
            channel_name=channel.name if channel is not None else None,
            author=_to_author(post.user_id, user) if post.user_id else None,
        )

    def get_root_message(self, post_id: str) -> Optional[ThreadMessage]:
        """The message whose id equals the post id, or None if it was deleted."""
        row = (
            self.db.query(Message, User)
            .outerjoin(User, User.id == Message.user_id)
            .options(selectinload(Message.attachments))
            .filter(Message.post_id == post_id, Message.id == post_id)
            .first()
        )
        if row is None:
            return None
        return _to_thread_message(*row)

    def get_thread_messages(self, post_id: str) -> List[ThreadMessage]:
        """Replies in the post (root excluded), oldest first."""
        rows = (
            self.db.query(Message, User)
            .outerjoin(User, User.id == Message.user_id)
            .options(selectinload(Message.attachments))
            .filter(Message.post_id == post_id, Message.id != post_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )
        return [_to_thread_message(message, user) for message, user in rows]

    def get_thread_view(self, post_id: str) -> Optional[PostThreadView]:
        """Assemble the full view, or None if the post does not exist."""
        post = self.get_post_summary(post_id)
        if post is None:
            return None
        root_message = self.get_root_message(post_id)
        messages = self.get_thread_messages(post_id)
        return assemble_thread(post, root_message, messages)
