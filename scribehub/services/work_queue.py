import asyncio
import logging
import os
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class OverflowPolicy(str, Enum):
    BLOCK = "block"
    DROP_OLDEST = "drop_oldest"


class JobQueue:
    """Fila limitada de ids de jobs entre o controlador e o worker.

    Com `block`, `put` espera por espaço. Com `drop_oldest`, o id mais antigo
    é descartado; o job continua `pending` no banco e volta para a fila no
    próximo arranque.
    """

    def __init__(self, maxsize: Optional[int] = None, overflow: Optional[str] = None):
        self.maxsize = maxsize or int(os.getenv("JOB_QUEUE_SIZE", 100))
        self.overflow = OverflowPolicy(overflow or os.getenv("JOB_QUEUE_OVERFLOW", OverflowPolicy.BLOCK.value))
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=self.maxsize)

    async def put(self, job_id: str) -> None:
        if self.overflow is OverflowPolicy.DROP_OLDEST:
            while self._queue.full():
                dropped = self._queue.get_nowait()
                self._queue.task_done()
                logger.warning(f"[{dropped}] Fila cheia, job descartado da fila (continua pendente)")
            self._queue.put_nowait(job_id)
            return
        await self._queue.put(job_id)

    async def get(self) -> str:
        return await self._queue.get()

    def task_done(self) -> None:
        self._queue.task_done()

    async def join(self) -> None:
        await self._queue.join()

    def qsize(self) -> int:
        return self._queue.qsize()

    def full(self) -> bool:
        return self._queue.full()
