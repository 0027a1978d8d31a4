import os
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .file_handler import FileHandler
from .job_cache import JobCache
from .notifier import ConnectionManager
from .translator import TranslationClient
from .work_queue import JobQueue
from ..database.store import JobStore
from ..domain.job_fsm import ensure_transition, is_terminal
from ..errors import (
    InvalidFilenameFormatError,
    JobNotFoundError,
    JobNotModifiedError,
    MediaIOError,
    ScribeHubError,
    StorageError,
    ValidationError,
)
from ..models.job import Job, JobUpdate
from ..models.transcription import TranscriptionResult, TranscriptionStatus
from ..utils.helpers import build_file_name, generate_job_id, split_file_name
from ..utils.validators import (
    normalize_device,
    parse_beam_size,
    parse_hotwords,
    validate_new_file_name,
    validate_result,
)

logger = logging.getLogger(__name__)


class JobLifecycleController:
    """Dono da máquina de estados dos jobs.

    Toda mudança passa por `_commit`: primeiro persiste, depois faz broadcast
    do valor devolvido pelo store. Se a persistência falhar não há broadcast.
    """

    def __init__(
            self,
            store: JobStore,
            notifier: ConnectionManager,
            file_handler: FileHandler,
            queue: JobQueue,
            translator: Optional[TranslationClient] = None,
            cache: Optional[JobCache] = None,
            translation_failure_terminal: Optional[bool] = None
    ):
        self.store = store
        self.notifier = notifier
        self.file_handler = file_handler
        self.queue = queue
        self.translator = translator or TranslationClient()
        self.cache = cache or JobCache()
        if translation_failure_terminal is None:
            translation_failure_terminal = os.getenv("TRANSLATION_FAILURE_TERMINAL", "false").lower() == "true"
        self.translation_failure_terminal = translation_failure_terminal

    async def create(
            self,
            file_name: Optional[str] = None,
            source_url: Optional[str] = None,
            language: Optional[str] = None,
            model_size: Optional[str] = None,
            device: Optional[str] = None,
            beam_size: Optional[str] = None,
            initial_prompt: Optional[str] = None,
            hotwords: Optional[str] = None
    ) -> Job:
        if not file_name and not source_url:
            raise ValidationError("É necessário fornecer um arquivo ou sourceUrl")

        job = Job(
            id=generate_job_id(),
            status=TranscriptionStatus.PENDING,
            task="transcribe",
            file_name=file_name,
            source_url=source_url or None,
            language=language or "auto",
            model_size=model_size or "small",
            device=normalize_device(device),
            beam_size=parse_beam_size(beam_size),
            initial_prompt=initial_prompt or None,
            hotwords=parse_hotwords(hotwords),
        )

        created = self.store.create(job)
        logger.info(f"[{created.id}] Job criado no banco de dados")

        await self.notifier.broadcast(created)
        await self.queue.put(created.id)
        return created

    async def get(self, job_id: str) -> Job:
        cached = await self.cache.get(job_id)
        if cached:
            return cached

        job = self.store.get(job_id)
        if job is None:
            logger.warning(f"[{job_id}] Job não encontrado")
            raise JobNotFoundError(job_id)

        if is_terminal(job.status):
            await self.cache.set(job)
        return job

    async def list(self) -> List[Job]:
        return self.store.get_all()

    async def update(self, partial: JobUpdate) -> Job:
        current = self.store.get(partial.id)
        if current is None:
            raise JobNotModifiedError(partial.id)

        changes: Dict[str, Any] = {
            field: getattr(partial, field)
            for field in partial.model_fields_set
            if field != "id" and getattr(partial, field) is not None
        }
        new_status = changes.pop("status", None)
        if "device" in changes:
            changes["device"] = normalize_device(changes["device"])
        if "file_name" in changes:
            validate_new_file_name(changes["file_name"])

        merged = current.model_copy(update=changes)
        if new_status is not None:
            merged = self._transition(merged, new_status)
        # Um job `done` nunca fica com resultado vazio
        if "result" in changes or merged.status == TranscriptionStatus.DONE:
            validate_result(merged.result)
        return await self._commit(merged)

    async def delete(self, job_id: str) -> None:
        job = self.store.get(job_id)
        if job is None:
            logger.warning(f"[{job_id}] Job não encontrado")
            raise JobNotFoundError(job_id)

        if job.file_name and not await self.file_handler.delete_file(job.file_name):
            logger.error(f"[{job_id}] Erro ao remover arquivo {job.file_name}")

        self.store.delete(job_id)
        await self.cache.invalidate(job_id)
        logger.info(f"[{job_id}] Job removido")

    async def rename(self, job_id: str, new_name: Optional[str]) -> Job:
        new_name = validate_new_file_name(new_name)
        job = await self._get_fresh(job_id)

        parts = split_file_name(job.file_name or "")
        if parts is None:
            raise InvalidFilenameFormatError("Invalid filename format", {"file_name": job.file_name})
        prefix, _ = parts

        old_name = job.file_name
        new_full_name = build_file_name(prefix, new_name)

        # Fase 1: rename em disco
        try:
            self.file_handler.rename_file(old_name, new_full_name)
        except OSError as e:
            logger.error(f"[{job_id}] Erro ao renomear {old_name} para {new_full_name}: {e}")
            raise MediaIOError("Error renaming file", {"job_id": job_id}) from e

        # Fase 2: confirmar no banco; se falhar, desfazer o rename
        try:
            updated = self.store.update(job.model_copy(update={"file_name": new_full_name}))
        except (StorageError, JobNotModifiedError) as e:
            logger.error(f"[{job_id}] Erro ao atualizar nome do arquivo no banco: {e}")
            rollback_error = None
            try:
                self.file_handler.rename_file(new_full_name, old_name)
            except OSError as revert_error:
                rollback_error = str(revert_error)
                logger.warning(
                    f"[{job_id}] Falha ao desfazer rename, arquivo ficou como {new_full_name}: {revert_error}"
                )
            raise StorageError("Error updating database", {"job_id": job_id}, rollback_error=rollback_error) from e

        await self._publish(updated)
        return updated

    async def translate(self, job_id: str, target_language: str) -> Job:
        job = await self._get_fresh(job_id)
        if job.result is None:
            raise ValidationError("Transcrição sem resultado para traduzir")

        job = await self._commit(self._transition(job, TranscriptionStatus.TRANSLATING))

        try:
            translation = await self.translator.translate(job.result, target_language)
        except ScribeHubError as e:
            logger.debug(f"[{job_id}] Erro na tradução: {e}")
            if self.translation_failure_terminal:
                await self.fail(job_id, f"Erro na tradução: {e}")
            raise

        translated = job.model_copy(update={"translations": [*job.translations, translation]})
        return await self._commit(self._transition(translated, TranscriptionStatus.DONE))

    async def ingest_result(self, job_id: str, result: Union[TranscriptionResult, Dict[str, Any], None]) -> Job:
        if not job_id:
            raise ValidationError("transcriptionId is required")
        if result is None:
            raise ValidationError("result is required")

        job = await self._get_fresh(job_id)

        if not isinstance(result, TranscriptionResult):
            try:
                result = TranscriptionResult.model_validate(result)
            except PydanticValidationError as e:
                logger.error(f"[{job_id}] Erro ao validar estrutura do resultado: {e}")
                raise ValidationError("Invalid transcription result format") from e
        validate_result(result)

        return await self._commit(job.model_copy(update={"result": result}))

    # Transições usadas pelo worker

    async def mark_downloading(self, job_id: str) -> Job:
        return await self._advance(job_id, TranscriptionStatus.DOWNLOADING)

    async def mark_processing(self, job_id: str) -> Job:
        return await self._advance(job_id, TranscriptionStatus.PROCESSING)

    async def attach_media(self, job_id: str, file_name: str) -> Job:
        job = await self._get_fresh(job_id)
        return await self._commit(job.model_copy(update={"file_name": file_name}))

    async def complete(self, job_id: str, result: TranscriptionResult) -> Job:
        job = await self._get_fresh(job_id)
        job = job.model_copy(update={"result": validate_result(result), "error_message": None})
        return await self._commit(self._transition(job, TranscriptionStatus.DONE))

    async def fail(self, job_id: str, message: str) -> Job:
        job = await self._get_fresh(job_id)
        job = job.model_copy(update={"error_message": message})
        logger.error(f"[{job_id}] Job falhou: {message}")
        return await self._commit(self._transition(job, TranscriptionStatus.FAILED))

    async def _advance(self, job_id: str, status: TranscriptionStatus) -> Job:
        job = await self._get_fresh(job_id)
        return await self._commit(self._transition(job, status))

    async def _get_fresh(self, job_id: str) -> Job:
        job = self.store.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def _transition(self, job: Job, new_status: TranscriptionStatus) -> Job:
        ensure_transition(job.status, new_status)
        if new_status == TranscriptionStatus.DONE:
            validate_result(job.result)
        if new_status != job.status:
            logger.info(f"[{job.id}] Status: {job.status.value} -> {new_status.value}")
        return job.model_copy(update={"status": new_status})

    async def _commit(self, job: Job) -> Job:
        updated = self.store.update(job)
        await self._publish(updated)
        return updated

    async def _publish(self, job: Job) -> None:
        if is_terminal(job.status):
            await self.cache.set(job)
        else:
            await self.cache.invalidate(job.id)
        await self.notifier.broadcast(job)
