import asyncio
import logging

import aiofiles

from .asr_client import ASRClient
from .lifecycle import JobLifecycleController
from .media_acquirer import MediaAcquirer
from .work_queue import JobQueue
from ..errors import JobNotFoundError, ScribeHubError
from ..models.transcription import TranscriptionStatus

logger = logging.getLogger(__name__)


class TranscriptionWorker:
    """Consome ids da fila e leva cada job pendente até `done` ou `failed`."""

    def __init__(
            self,
            controller: JobLifecycleController,
            queue: JobQueue,
            acquirer: MediaAcquirer,
            asr_client: ASRClient
    ):
        self.controller = controller
        self.queue = queue
        self.acquirer = acquirer
        self.asr_client = asr_client

    async def enqueue_pending(self) -> int:
        """Recoloca na fila os jobs que ficaram pendentes (mais antigos primeiro)"""
        pending = self.controller.store.get_all_with_status(TranscriptionStatus.PENDING)
        for job in reversed(pending):
            await self.queue.put(job.id)
        if pending:
            logger.info(f"{len(pending)} jobs pendentes recolocados na fila")
        return len(pending)

    async def run(self) -> None:
        while True:
            job_id = await self.queue.get()
            try:
                await self.process(job_id)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(f"[{job_id}] Erro inesperado no worker")
            finally:
                self.queue.task_done()

    async def process(self, job_id: str) -> None:
        try:
            job = await self.controller.get(job_id)
        except JobNotFoundError:
            logger.warning(f"[{job_id}] Job removido antes do processamento")
            return

        if job.status != TranscriptionStatus.PENDING:
            logger.debug(f"[{job_id}] Ignorado, status atual: {job.status.value}")
            return

        try:
            if job.source_url:
                job = await self.controller.mark_downloading(job.id)
                file_name = await self.acquirer.acquire(job)
                job = await self.controller.attach_media(job.id, file_name)

            job = await self.controller.mark_processing(job.id)

            media_path = self.controller.file_handler.path_for(job.file_name)
            async with aiofiles.open(media_path, "rb") as f:
                media = await f.read()
            result = await self.asr_client.transcribe(job, media, filename=job.file_name)

            await self.controller.complete(job.id, result)
            logger.info(f"[{job_id}] Transcrição concluída")
        except (ScribeHubError, OSError) as e:
            await self._fail(job_id, str(e))

    async def _fail(self, job_id: str, message: str) -> None:
        try:
            await self.controller.fail(job_id, message)
        except ScribeHubError as e:
            # Job removido ou já terminal enquanto processava
            logger.warning(f"[{job_id}] Não foi possível marcar como failed: {e}")
