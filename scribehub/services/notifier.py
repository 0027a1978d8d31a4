import asyncio
import logging
import os
from typing import List, Optional

from fastapi import WebSocket

from ..models.job import Job

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Conjunto de observadores ligados por WebSocket.

    Todo acesso à lista passa pelo lock. O broadcast copia a lista sob o lock
    e envia fora dele, com um timeout por conexão, para que um observador
    lento não segure o processamento dos jobs.
    """

    def __init__(self, send_timeout: Optional[float] = None):
        self._connections: List[WebSocket] = []
        self._lock = asyncio.Lock()
        self.send_timeout = send_timeout or float(os.getenv("WS_SEND_TIMEOUT", 5))

    async def register(self, connection: WebSocket) -> None:
        async with self._lock:
            self._connections.append(connection)
            total = len(self._connections)
        logger.debug(f"Observador conectado ({total} ativos)")

    async def unregister(self, connection: WebSocket) -> None:
        async with self._lock:
            for i, existing in enumerate(self._connections):
                if existing is connection:
                    del self._connections[i]
                    break
            total = len(self._connections)
        logger.debug(f"Observador desconectado ({total} ativos)")

    async def connections(self) -> List[WebSocket]:
        async with self._lock:
            return list(self._connections)

    async def broadcast(self, job: Job) -> None:
        payload = job.model_dump_json()
        for connection in await self.connections():
            try:
                await asyncio.wait_for(connection.send_text(payload), timeout=self.send_timeout)
            except Exception as e:
                # A remoção fica a cargo do loop de leitura da própria conexão
                logger.error(f"[{job.id}] Erro ao enviar job para observador: {e!r}")
