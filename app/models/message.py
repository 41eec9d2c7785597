"""Message and Attachment models. Messages are immutable once inserted."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from app.db import Base


class Message(Base):
    """One row per message in a post; ``reply_to_message_id`` may dangle."""

    __tablename__ = "messages"

    __table_args__ = (
        Index("ix_messages_post_created", "post_id", "created_at"),
    )

    id = Column(String(32), primary_key=True)
    post_id = Column(
        String(32), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False
    )
    user_id = Column(String(32), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    reply_to_message_id = Column(String(32), nullable=True)  # no FK: may be deleted
    created_at = Column(DateTime(timezone=True), nullable=False)

    attachments = relationship(
        "Attachment",
        back_populates="message",
        cascade="all, delete-orphan",
        order_by="Attachment.id",
    )


class Attachment(Base):
    __tablename__ = "attachments"

    id = Column(String(32), primary_key=True)
    message_id = Column(
        String(32),
        ForeignKey("messages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = Column(String(2048), nullable=False)
    name = Column(String(512), nullable=False)
    content_type = Column(String(256), nullable=True)

    message = relationship("Message", back_populates="attachments")
