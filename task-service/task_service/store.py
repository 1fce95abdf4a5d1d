import logging
import uuid
from typing import List

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import RedisError

from task_service.errors import InvalidTaskID, RecordDecodeError, StorageFailure, TaskNotFound
from task_service.models import Task, TaskUpdate

logger = logging.getLogger(__name__)

INDEX_KEY = "tasks"

# HSET on a missing key would create a partial record, so the existence
# check and the write have to happen in one step on the server.
# updated_at never drops below created_at; stamps compare as text.
_UPDATE_IF_EXISTS = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return 0
end
local created = redis.call('HGET', KEYS[1], 'created_at')
for i = 1, #ARGV, 2 do
    local value = ARGV[i + 1]
    if ARGV[i] == 'updated_at' and created and value < created then
        value = created
    end
    redis.call('HSET', KEYS[1], ARGV[i], value)
end
return 1
"""


def task_key(task_id: str) -> str:
    return f"task:{task_id}"


def new_task_id() -> str:
    return str(uuid.uuid4())


def parse_task_id(raw: str) -> str:
    """Return the canonical form of a task id or raise InvalidTaskID."""
    try:
        return str(uuid.UUID(raw))
    except (TypeError, ValueError) as exc:
        raise InvalidTaskID(raw) from exc


class TaskStore:
    """Task persistence over Redis.

    Each task is a hash under ``task:{id}``; the ``tasks`` set indexes the
    ids of every live record. The client is shared by all requests and is
    expected to be an ``redis.asyncio.Redis`` created with
    ``decode_responses=True``.
    """

    def __init__(self, client: redis.Redis):
        self._redis = client
        self._update_script = client.register_script(_UPDATE_IF_EXISTS)

    @classmethod
    def from_url(cls, url: str) -> "TaskStore":
        # Failures surface on the request that hit them; nothing is retried.
        client = redis.from_url(url, decode_responses=True, retry=Retry(NoBackoff(), 0))
        return cls(client)

    async def ping(self) -> None:
        try:
            await self._redis.ping()
            total = await self._redis.scard(INDEX_KEY)
        except RedisError as exc:
            logger.error("Task store unreachable: %s", exc)
            raise StorageFailure(f"store unreachable: {exc}") from exc
        logger.info("TaskStore ready total=%s", total)

    async def close(self) -> None:
        await self._redis.aclose()

    async def insert(self, task: Task) -> str:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.hset(task_key(task.id), mapping=task.to_document())
                pipe.sadd(INDEX_KEY, task.id)
                await pipe.execute()
        except RedisError as exc:
            raise StorageFailure(f"insert {task.id}: {exc}") from exc
        return task.id

    async def find_all(self) -> List[Task]:
        try:
            ids = sorted(await self._redis.smembers(INDEX_KEY))
            async with self._redis.pipeline(transaction=False) as pipe:
                for task_id in ids:
                    pipe.hgetall(task_key(task_id))
                docs = await pipe.execute()
        except UnicodeDecodeError as exc:
            raise RecordDecodeError(f"find all: stored bytes are not utf-8: {exc}") from exc
        except RedisError as exc:
            raise StorageFailure(f"find all: {exc}") from exc

        tasks = [Task.from_document(doc) for doc in docs if doc]
        tasks.sort(key=lambda t: (t.created_at, t.id))
        return tasks

    async def find_by_id(self, task_id: str) -> Task:
        try:
            doc = await self._redis.hgetall(task_key(task_id))
        except UnicodeDecodeError as exc:
            raise RecordDecodeError(f"find {task_id}: stored bytes are not utf-8: {exc}") from exc
        except RedisError as exc:
            raise StorageFailure(f"find {task_id}: {exc}") from exc
        if not doc:
            raise TaskNotFound(task_id)
        return Task.from_document(doc)

    async def update_by_id(self, task_id: str, update: TaskUpdate) -> int:
        args = []
        for field, value in update.to_fields().items():
            args.extend((field, value))
        try:
            matched = await self._update_script(keys=[task_key(task_id)], args=args)
        except RedisError as exc:
            raise StorageFailure(f"update {task_id}: {exc}") from exc
        return int(matched)

    async def delete_by_id(self, task_id: str) -> int:
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                pipe.delete(task_key(task_id))
                pipe.srem(INDEX_KEY, task_id)
                deleted, _ = await pipe.execute()
        except RedisError as exc:
            raise StorageFailure(f"delete {task_id}: {exc}") from exc
        return int(deleted)
