import json
import logging
from typing import Optional

from ..models.job import Job

logger = logging.getLogger(__name__)

CACHE_TTL = 86400  # 24 horas


class JobCache:
    """Cache Redis dos snapshots de jobs terminados.

    O cache não é crítico: qualquer erro é registrado e ignorado, e sem
    cliente Redis todas as operações são no-op.
    """

    def __init__(self, redis_client=None, ttl: int = CACHE_TTL):
        self.redis_client = redis_client
        self.ttl = ttl

    @staticmethod
    def _key(job_id: str) -> str:
        return f"job:{job_id}"

    async def get(self, job_id: str) -> Optional[Job]:
        if not self.redis_client:
            return None
        try:
            cached_data = await self.redis_client.get(self._key(job_id))
            if cached_data:
                return Job.model_validate(json.loads(cached_data))
            return None
        except Exception as e:
            logger.warning(f"[{job_id}] Erro ao buscar no Redis: {e}")
            return None

    async def set(self, job: Job) -> None:
        if not self.redis_client:
            return
        try:
            await self.redis_client.setex(self._key(job.id), self.ttl, job.model_dump_json())
            logger.debug(f"[{job.id}] Job salvo no cache Redis")
        except Exception as e:
            logger.warning(f"[{job.id}] Erro ao salvar no Redis: {e}")

    async def invalidate(self, job_id: str) -> None:
        if not self.redis_client:
            return
        try:
            await self.redis_client.delete(self._key(job_id))
        except Exception as e:
            logger.warning(f"[{job_id}] Erro ao invalidar cache Redis: {e}")
