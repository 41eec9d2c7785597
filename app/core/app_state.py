from app.core.dedup_cache import DedupCache


class AppState:
    def __init__(self) -> None:
        self.channel_cache = DedupCache()


state = AppState()
