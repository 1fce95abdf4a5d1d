from datetime import datetime, timedelta, timezone

from redis.exceptions import ConnectionError


class TickingClock:
    """Clock that moves one second forward on every read."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc)) -> None:
        self.now = start
        self.calls = 0

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        self.calls += 1
        return self.now


class _BrokenPipeline:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def __getattr__(self, name):
        # Queued commands chain like a real pipeline; execute() fails.
        return lambda *args, **kwargs: self

    async def execute(self):
        raise ConnectionError("Connection refused")


class BrokenRedis:
    """Redis client stand-in whose every round trip fails."""

    def register_script(self, script):
        return self._fail

    def pipeline(self, transaction=True):
        return _BrokenPipeline()

    async def _fail(self, *args, **kwargs):
        raise ConnectionError("Connection refused")

    ping = scard = smembers = hgetall = _fail

    async def aclose(self):
        pass
