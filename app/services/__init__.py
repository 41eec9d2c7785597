from app.services.channel_sync_service import ChannelSyncService
from app.services.message_sync_service import MessageSyncService
from app.services.thread_service import ThreadService

__all__ = [
    "ChannelSyncService",
    "MessageSyncService",
    "ThreadService",
]
