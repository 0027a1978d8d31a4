import os
import logging
from typing import Optional, Tuple

import httpx

from ..database.store import JobStore
from ..models.transcription import ServiceStatus

logger = logging.getLogger(__name__)

PROBE_TIMEOUT = 10.0


class HealthProber:
    """Verifica se o serviço de ASR está de pé.

    O ASR atende um pedido de cada vez e pode não responder ao healthcheck
    enquanto transcreve; por isso `service_status` consulta os jobs em
    execução antes de declarar indisponibilidade.
    """

    def __init__(self, store: JobStore, endpoint: Optional[str] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self.store = store
        self.endpoint = endpoint or os.getenv("ASR_ENDPOINT", "localhost:8000")
        self.client = client or httpx.AsyncClient(timeout=PROBE_TIMEOUT)

    async def probe(self) -> Tuple[bool, str]:
        url = f"http://{self.endpoint}/healthcheck"
        try:
            response = await self.client.get(url, timeout=PROBE_TIMEOUT)
        except httpx.HTTPError as e:
            return False, str(e) or type(e).__name__

        try:
            body = response.text
        except (httpx.HTTPError, UnicodeDecodeError) as e:
            logger.debug(f"Erro ao ler corpo do healthcheck: {e}")
            body = ""

        message = body or f"HTTP {response.status_code}"
        return response.is_success, message

    async def service_status(self) -> ServiceStatus:
        healthy, message = await self.probe()
        if healthy:
            return ServiceStatus(status="ok", service_message=message)

        running = self.store.get_all_running()
        if running:
            logger.debug(f"Healthcheck do ASR falhou mas há {len(running)} transcrições em execução")
            return ServiceStatus(
                status="ok",
                service_message="transcription service unreachable but there are running transcriptions",
            )

        logger.warning(f"Serviço de transcrição indisponível: {message}")
        return ServiceStatus(
            status="error",
            error="transcription service unavailable",
            service_message=message,
        )

    async def close(self):
        await self.client.aclose()
