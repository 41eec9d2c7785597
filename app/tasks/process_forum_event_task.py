"""Task for processing inbound forum feed events."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import ValidationError

from app.config import get_settings
from app.core.app_state import state
from app.core.dedup_cache import DedupCache
from app.db import db_manager
from app.exceptions import SyncError
from app.infra.celery_app import celery_app
from app.infra.logging_config import get_logger
from app.schemas.forum_event import (
    CHANNEL_CREATED,
    CHANNEL_UPDATED,
    MESSAGE_CREATED,
    ForumEventEnvelope,
    ForumThreadChannel,
    MessageCreatedEvent,
    parse_channel_event,
)
from app.services.channel_sync_service import ChannelSyncService
from app.services.message_sync_service import MessageSyncService

logger = get_logger("forum_event_task")

settings = get_settings()


def handle_channel_event(data: Dict, cache: DedupCache) -> bool:
    """Sync a created/updated channel. Returns True if a write was issued."""
    channel = parse_channel_event(data)
    with db_manager.db_session() as db:
        return ChannelSyncService(db, cache).sync_channel(channel)


def handle_message_created(data: Dict, cache: DedupCache) -> bool:
    """Sync the message's parent channel, then the message itself."""
    event = MessageCreatedEvent.model_validate(data)
    channel = event.channel.to_channel()
    if not isinstance(channel, ForumThreadChannel):
        logger.debug("Ignoring message %s outside a forum thread", event.message.id)
        return False

    with db_manager.db_session() as db:
        ChannelSyncService(db, cache).sync_from_message_context(channel)
        return MessageSyncService(db).sync_message(
            channel, event.message, event.author
        )


def dispatch_event(envelope: ForumEventEnvelope, cache: DedupCache) -> bool:
    if envelope.event_type in (CHANNEL_CREATED, CHANNEL_UPDATED):
        return handle_channel_event(envelope.data, cache)
    if envelope.event_type == MESSAGE_CREATED:
        return handle_message_created(envelope.data, cache)
    logger.debug("Ignoring unsupported event type: %s", envelope.event_type)
    return False


@celery_app.task(
    name="app.tasks.process_forum_event_task.process_forum_event_task",
    autoretry_for=(SyncError,),
    retry_backoff=settings.sync_retry_backoff_seconds,
    max_retries=settings.sync_max_retries,
)
def process_forum_event_task(msg: Dict) -> Optional[str]:
    """
    Process one forum feed event and mirror it into the database.

    Store failures raise SyncError and are retried by Celery; the channel
    cache is only marked after a successful write, so a retry writes again.

    Args:
        msg: Event envelope, ``{"type": ..., "data": {...}}``.

    Returns:
        Optional[str]: The event type, or None on validation error
    """
    try:
        envelope = ForumEventEnvelope.model_validate(msg)
        dispatch_event(envelope, state.channel_cache)
    except ValidationError as e:
        logger.warning("Invalid forum event payload: %s", e)
        return None

    return envelope.event_type
