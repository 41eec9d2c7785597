"""
Inbound forum feed contracts.

The feed delivers flat channel payloads; ``InboundChannelEvent.to_channel``
turns them into one of the closed channel variants below so the sync
services dispatch on type instead of probing for optional fields.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

CHANNEL_CREATED = "channel.created"
CHANNEL_UPDATED = "channel.updated"
MESSAGE_CREATED = "message.created"


class ChannelKind(str, Enum):
    """Channel kinds seen on the feed. Only text and forum channels are mirrored."""

    TEXT = "text"
    FORUM = "forum"
    FORUM_THREAD = "forum_thread"
    VOICE = "voice"
    CATEGORY = "category"
    DIRECT_MESSAGE = "dm"
    OTHER = "other"


class TextChannel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ChannelKind.TEXT] = ChannelKind.TEXT
    id: str
    name: str
    topic: Optional[str] = None


class ForumChannel(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ChannelKind.FORUM] = ChannelKind.FORUM
    id: str
    name: str
    topic: Optional[str] = None


class OtherChannel(BaseModel):
    """Any channel this service does not mirror (voice, categories, DMs, ...)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[
        ChannelKind.VOICE,
        ChannelKind.CATEGORY,
        ChannelKind.DIRECT_MESSAGE,
        ChannelKind.OTHER,
    ] = ChannelKind.OTHER
    id: str
    name: Optional[str] = None


ParentChannel = Annotated[
    Union[TextChannel, ForumChannel, OtherChannel], Field(discriminator="kind")
]


class ForumThreadChannel(BaseModel):
    """A post inside a forum (or a thread under a text channel)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[ChannelKind.FORUM_THREAD] = ChannelKind.FORUM_THREAD
    id: str
    name: str
    owner_id: Optional[str] = None
    parent_id: Optional[str] = None
    parent_kind: Optional[ChannelKind] = None
    parent: Optional[ParentChannel] = None  # None when the parent is unresolvable

    @property
    def mirrored_parent_id(self) -> Optional[str]:
        """Id of the text or forum channel the thread lives under, if any."""
        if self.parent is not None:
            if isinstance(self.parent, (TextChannel, ForumChannel)):
                return self.parent.id
            return None
        if self.parent_kind in (ChannelKind.TEXT, ChannelKind.FORUM):
            return self.parent_id
        return None


AnyChannel = Union[TextChannel, ForumChannel, ForumThreadChannel, OtherChannel]


class InboundChannelEvent(BaseModel):
    """Flat channel payload as delivered by the feed."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: Optional[str] = None
    kind: ChannelKind
    topic: Optional[str] = None
    parent_id: Optional[str] = Field(None, alias="parentId")
    parent_kind: Optional[ChannelKind] = Field(None, alias="parentKind")
    owner_id: Optional[str] = Field(None, alias="ownerId")
    parent: Optional[InboundChannelEvent] = None

    @field_validator("kind", "parent_kind", mode="before")
    @classmethod
    def _coerce_unknown_kind(cls, value: Any) -> Any:
        if value is None or isinstance(value, ChannelKind):
            return value
        try:
            return ChannelKind(value)
        except ValueError:
            return ChannelKind.OTHER

    def to_channel(self) -> AnyChannel:
        """Build the channel variant. Raises ValidationError on missing names."""
        if self.kind == ChannelKind.TEXT:
            return TextChannel(id=self.id, name=self.name, topic=self.topic)
        if self.kind == ChannelKind.FORUM:
            return ForumChannel(id=self.id, name=self.name, topic=self.topic)
        if self.kind == ChannelKind.FORUM_THREAD:
            return ForumThreadChannel(
                id=self.id,
                name=self.name,
                owner_id=self.owner_id,
                parent_id=self.parent_id,
                parent_kind=self.parent_kind,
                parent=self._resolve_parent(),
            )
        return OtherChannel(id=self.id, kind=self.kind, name=self.name)

    def _resolve_parent(
        self,
    ) -> Optional[Union[TextChannel, ForumChannel, OtherChannel]]:
        # A bare parentId/parentKind carries no name to write, so it cannot be synced
        if self.parent is None:
            return None
        if self.parent_id is not None and self.parent.id != self.parent_id:
            return None
        if self.parent_kind is not None and self.parent.kind != self.parent_kind:
            return None
        parent = self.parent.to_channel()
        if isinstance(parent, ForumThreadChannel):
            return None
        return parent


def parse_channel_event(payload: Mapping[str, Any]) -> AnyChannel:
    """Validate a raw feed payload and return its channel variant."""
    return InboundChannelEvent.model_validate(payload).to_channel()


class InboundAttachment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    url: str
    name: str
    content_type: Optional[str] = Field(None, alias="contentType")


class InboundAuthor(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    avatar_url: Optional[str] = Field(None, alias="avatarUrl")


class InboundMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str = ""
    created_at: datetime = Field(alias="createdAt")
    reply_to_message_id: Optional[str] = Field(None, alias="replyToMessageId")
    attachments: list[InboundAttachment] = Field(default_factory=list)

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken to be UTC already
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class MessageCreatedEvent(BaseModel):
    """A message posted in some channel context, with its author."""

    channel: InboundChannelEvent
    message: InboundMessage
    author: InboundAuthor


class ForumEventEnvelope(BaseModel):
    """Typed envelope around every feed record."""

    model_config = ConfigDict(populate_by_name=True)

    event_type: str = Field(alias="type")
    data: dict[str, Any] = Field(default_factory=dict)
