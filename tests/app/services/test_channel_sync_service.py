"""Tests for ChannelSyncService."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from app.core.dedup_cache import DedupCache
from app.exceptions import ChannelSyncError
from app.models.channel import Channel
from app.schemas.forum_event import (
    ChannelKind,
    ForumChannel,
    ForumThreadChannel,
    OtherChannel,
    TextChannel,
)
from app.services.channel_sync_service import ChannelSyncService

UPSERT = "app.services.channel_sync_service.insert_or_update"


@pytest.fixture
def forum_channel():
    return ForumChannel(id="1001", name="help-forum", topic="Ask here")


def test_sync_channel_creates_row(db, channel_cache, forum_channel):
    svc = ChannelSyncService(db, channel_cache)
    assert svc.sync_channel(forum_channel) is True

    row = svc.get_channel("1001")
    assert row is not None
    assert row.name == "help-forum"
    assert row.kind == "forum"
    assert row.topic == "Ask here"
    assert channel_cache.has("1001")


def test_sync_channel_twice_yields_one_row(db, forum_channel):
    ChannelSyncService(db, DedupCache()).sync_channel(forum_channel)
    ChannelSyncService(db, DedupCache()).sync_channel(forum_channel)

    rows = db.query(Channel).filter(Channel.id == "1001").all()
    assert len(rows) == 1
    assert rows[0].name == "help-forum"
    assert rows[0].topic == "Ask here"


def test_sync_channel_updates_name_and_topic_only(db, forum_channel):
    ChannelSyncService(db, DedupCache()).sync_channel(forum_channel)
    renamed = TextChannel(id="1001", name="questions", topic=None)
    ChannelSyncService(db, DedupCache()).sync_channel(renamed)

    db.expire_all()
    row = db.query(Channel).filter(Channel.id == "1001").one()
    assert row.name == "questions"
    assert row.topic is None
    assert row.kind == "forum"


def test_cached_channel_skips_store(db, channel_cache, forum_channel):
    svc = ChannelSyncService(db, channel_cache)
    with patch(UPSERT) as upsert:
        assert svc.sync_channel(forum_channel) is True
        assert svc.sync_channel(forum_channel) is False
        assert svc.sync_channel(forum_channel) is False
    assert upsert.call_count == 1


def test_sync_channel_upsert_arguments(channel_cache):
    db = MagicMock()
    channel = TextChannel(id="5", name="general", topic="Chat")
    with patch(UPSERT) as upsert:
        ChannelSyncService(db, channel_cache).sync_channel(channel)

    upsert.assert_called_once_with(
        db,
        Channel,
        key="id",
        values={"id": "5", "name": "general", "kind": "text", "topic": "Chat"},
        update_fields=["name", "topic"],
    )
    db.commit.assert_called_once()


@pytest.mark.parametrize(
    "channel",
    [
        OtherChannel(id="7", kind=ChannelKind.VOICE, name="Lounge"),
        OtherChannel(id="8", kind=ChannelKind.DIRECT_MESSAGE),
        ForumThreadChannel(
            id="9", name="Post", parent=ForumChannel(id="1", name="help")
        ),
    ],
)
def test_rejected_kinds_touch_nothing(channel):
    db = MagicMock()
    cache = MagicMock(spec=DedupCache)
    with patch(UPSERT) as upsert:
        assert ChannelSyncService(db, cache).sync_channel(channel) is False
    upsert.assert_not_called()
    db.commit.assert_not_called()
    cache.has.assert_not_called()
    cache.mark.assert_not_called()


def test_store_failure_leaves_cache_unmarked(forum_channel):
    db = MagicMock()
    cache = DedupCache()
    error = OperationalError("INSERT", {}, Exception("connection refused"))
    with patch(UPSERT, side_effect=error):
        with pytest.raises(ChannelSyncError) as exc_info:
            ChannelSyncService(db, cache).sync_channel(forum_channel)

    assert exc_info.value.__cause__ is error
    db.rollback.assert_called_once()
    assert cache.has(forum_channel.id) is False


def test_retry_after_store_failure_writes_again(forum_channel):
    db = MagicMock()
    cache = DedupCache()
    error = OperationalError("INSERT", {}, Exception("timeout"))
    with patch(UPSERT, side_effect=[error, None]) as upsert:
        svc = ChannelSyncService(db, cache)
        with pytest.raises(ChannelSyncError):
            svc.sync_channel(forum_channel)
        assert svc.sync_channel(forum_channel) is True
    assert upsert.call_count == 2
    assert cache.has(forum_channel.id)


def test_sync_from_message_context_syncs_parent(db, channel_cache):
    parent = TextChannel(id="20", name="support")
    thread = ForumThreadChannel(id="21", name="Thread", parent=parent)

    svc = ChannelSyncService(db, channel_cache)
    assert svc.sync_from_message_context(thread) is True
    assert svc.get_channel("20") is not None
    assert svc.get_channel("21") is None


@pytest.mark.parametrize(
    "context",
    [
        TextChannel(id="30", name="general"),
        ForumChannel(id="31", name="help"),
        OtherChannel(id="32", kind=ChannelKind.DIRECT_MESSAGE),
        ForumThreadChannel(id="33", name="Orphan", parent=None),
        ForumThreadChannel(
            id="34",
            name="Under a category",
            parent=OtherChannel(id="35", kind=ChannelKind.CATEGORY, name="cat"),
        ),
    ],
)
def test_sync_from_message_context_noops(context):
    db = MagicMock()
    cache = MagicMock(spec=DedupCache)
    with patch(UPSERT) as upsert:
        assert ChannelSyncService(db, cache).sync_from_message_context(context) is False
    upsert.assert_not_called()
    cache.mark.assert_not_called()


def test_sync_channel_logs_channel_name(db, channel_cache, forum_channel, caplog):
    with caplog.at_level("INFO", logger="forum_mirror.channels"):
        ChannelSyncService(db, channel_cache).sync_channel(forum_channel)
    assert "Synced channel (#help-forum)" in caplog.text
