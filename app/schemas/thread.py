"""Pydantic schemas for the assembled question/answer thread view."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ThreadAttachment(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    url: str
    name: str
    content_type: Optional[str] = None


class ThreadAuthor(BaseModel):
    """Author as shown next to a message. Username is None when the user row is missing."""

    id: str
    username: Optional[str] = None
    avatar_url: Optional[str] = None


class ThreadMessage(BaseModel):
    """A message loaded for one thread, with its author and attachments."""

    id: str
    author: ThreadAuthor
    content: str = ""
    created_at: datetime
    reply_to_message_id: Optional[str] = None
    attachments: list[ThreadAttachment] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Reply states
# -----------------------------------------------------------------------------


class NoReply(BaseModel):
    """The message does not reply to anything."""

    state: Literal["none"] = "none"


class ResolvedReply(BaseModel):
    """The replied-to message was found in the loaded set."""

    state: Literal["resolved"] = "resolved"
    target_id: str
    author: ThreadAuthor
    content: str
    attachments: list[ThreadAttachment] = Field(default_factory=list)


class DanglingReply(BaseModel):
    """The message replies to something that is no longer available."""

    state: Literal["deleted"] = "deleted"
    target_id: str


ReplyState = Annotated[
    Union[NoReply, ResolvedReply, DanglingReply], Field(discriminator="state")
]


# -----------------------------------------------------------------------------
# Grouping
# -----------------------------------------------------------------------------


class MessageGroup(BaseModel):
    """Consecutive messages by one author."""

    author_id: str
    is_answer_group: bool = False
    messages: list[ThreadMessage] = Field(default_factory=list)


class ThreadMessageView(BaseModel):
    message: ThreadMessage
    reply: ReplyState = Field(default_factory=NoReply)
    is_first_row: bool = False
    is_op: bool = False


class MessageGroupView(BaseModel):
    author_id: str
    is_answer_group: bool = False
    messages: list[ThreadMessageView] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Post view
# -----------------------------------------------------------------------------


class PostSummary(BaseModel):
    id: str
    title: str
    created_at: datetime
    answer_id: Optional[str] = None
    channel_id: str
    channel_name: Optional[str] = None
    author: Optional[ThreadAuthor] = None


class PostThreadView(BaseModel):
    """
    Display-ready thread: the root message, the accepted (or suggested)
    answer and the replies grouped by author.

    ``root_message`` is None when the original message was deleted.
    """

    post: PostSummary
    root_message: Optional[ThreadMessage] = None
    has_answer: bool = False
    answer_message: Optional[ThreadMessage] = None
    suggested_answer: Optional[ThreadMessage] = None
    reply_count: int = 0
    groups: list[MessageGroupView] = Field(default_factory=list)
