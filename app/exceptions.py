"""Errors raised by the sync services when the store rejects a write."""


class SyncError(Exception):
    """A write to the store failed; safe to retry."""


class ChannelSyncError(SyncError):
    pass


class MessageSyncError(SyncError):
    pass
