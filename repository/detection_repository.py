# repository/detection_repository.py
from redis.asyncio import Redis
from config.cache import get_redis
from model.verdict import DetectionRecord
from repository.namespaces import DETECTIONS


class DetectionRepository:
    """
    Flow:
    - Append every verdict (remote or fallback) to a Redis list (RPUSH).
    - Records are never updated or deleted here; no TTL.
    """

    @staticmethod
    async def _client() -> Redis:
        return await get_redis()

    async def append(self, record: DetectionRecord) -> None:
        r = await self._client()
        await r.rpush(DETECTIONS, record.model_dump_json())
