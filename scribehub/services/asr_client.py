import os
import logging
from typing import Any, BinaryIO, Dict, Optional, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..errors import ASRDecodeError, ASRServiceError
from ..models.job import Job
from ..models.transcription import TranscriptionResult

logger = logging.getLogger(__name__)


def _dispatch_timeout_from_env() -> Optional[float]:
    value = os.getenv("ASR_DISPATCH_TIMEOUT", "").strip()
    return float(value) if value else None


class ASRClient:
    """Cliente do serviço de reconhecimento de fala (`POST /transcribe`).

    Não faz retry: qualquer falha é devolvida a quem chamou, que decide o
    próximo status do job. Sem `ASR_DISPATCH_TIMEOUT` o pedido não tem limite
    de tempo, porque transcrições longas podem levar horas.
    """

    def __init__(
            self,
            endpoint: Optional[str] = None,
            dispatch_timeout: Optional[float] = None,
            client: Optional[httpx.AsyncClient] = None
    ):
        self.endpoint = endpoint or os.getenv("ASR_ENDPOINT", "localhost:8000")
        self.base_url = f"http://{self.endpoint}"
        self.dispatch_timeout = dispatch_timeout if dispatch_timeout is not None else _dispatch_timeout_from_env()

        self.client = client or httpx.AsyncClient(
            headers={
                "Accept": "application/json",
                "User-Agent": "ScribeHub/1.0"
            },
            timeout=httpx.Timeout(self.dispatch_timeout)
        )

    def build_form(self, job: Job) -> Dict[str, Any]:
        """Campos do formulário multipart; os opcionais só vão quando preenchidos"""
        data: Dict[str, Any] = {
            "model_size": job.model_size,
            "task": job.task,
            "language": job.language,
            "device": job.device,
        }
        if job.beam_size and job.beam_size > 0:
            data["beam_size"] = str(job.beam_size)
        if job.initial_prompt:
            data["initial_prompt"] = job.initial_prompt
        if job.hotwords:
            data["hotwords"] = ",".join(job.hotwords)
        return data

    async def transcribe(
            self,
            job: Job,
            media: Union[bytes, BinaryIO],
            filename: Optional[str] = None
    ) -> TranscriptionResult:
        url = f"{self.base_url}/transcribe"
        files = {"file": (filename or job.file_name or job.id, media)}

        logger.info(f"[{job.id}] Enviando mídia para o ASR: {url}")

        try:
            response = await self.client.post(url, data=self.build_form(job), files=files)
        except httpx.HTTPError as e:
            logger.error(f"[{job.id}] Erro ao enviar pedido ao ASR: {e}")
            raise ASRServiceError(None, str(e)) from e

        if not response.is_success:
            logger.error(f"[{job.id}] Resposta de {url} | Status: {response.status_code} | Detalhes: {response.text}")
            raise ASRServiceError(response.status_code, response.text)

        try:
            return TranscriptionResult.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"[{job.id}] Erro ao decodificar resposta do ASR: {e}")
            logger.debug(f"[{job.id}] Resposta do ASR: {response.text}")
            raise ASRDecodeError("Resposta inválida do serviço de transcrição", {"body": response.text}) from e

    async def close(self):
        """Fecha o cliente HTTP"""
        await self.client.aclose()
