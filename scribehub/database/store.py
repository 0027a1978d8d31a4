import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .models import JobRecord
from ..errors import JobNotModifiedError, StorageError
from ..models.job import Job
from ..models.transcription import RUNNING_STATUSES, TranscriptionStatus

logger = logging.getLogger(__name__)


class JobStore:
    """Armazenamento durável dos jobs.

    Cada operação abre a sua própria sessão. `update` distingue o caso em
    que nenhum registro foi encontrado (`JobNotModifiedError`) das restantes
    falhas de persistência (`StorageError`).
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def create(self, job: Job) -> Job:
        record = JobRecord(id=job.id, **self._to_values(job))
        try:
            with self.session_factory() as db:
                db.add(record)
                db.commit()
                db.refresh(record)
                return self._to_job(record)
        except SQLAlchemyError as e:
            logger.error(f"[{job.id}] Erro ao criar job no banco de dados: {e}")
            raise StorageError("Erro ao criar job", {"job_id": job.id}) from e

    def get(self, job_id: str) -> Optional[Job]:
        try:
            with self.session_factory() as db:
                record = db.get(JobRecord, job_id)
                return self._to_job(record) if record else None
        except SQLAlchemyError as e:
            logger.error(f"[{job_id}] Erro ao consultar job: {e}")
            raise StorageError("Erro ao consultar job", {"job_id": job_id}) from e

    def get_all(self) -> List[Job]:
        return self._query()

    def get_all_running(self) -> List[Job]:
        return self._query(*RUNNING_STATUSES)

    def get_all_with_status(self, status: TranscriptionStatus) -> List[Job]:
        return self._query(status)

    def update(self, job: Job) -> Job:
        try:
            with self.session_factory() as db:
                matched = (
                    db.query(JobRecord)
                    .filter(JobRecord.id == job.id)
                    .update(self._to_values(job), synchronize_session=False)
                )
                if matched == 0:
                    db.rollback()
                    raise JobNotModifiedError(job.id)
                db.commit()
                return self._to_job(db.get(JobRecord, job.id))
        except SQLAlchemyError as e:
            logger.error(f"[{job.id}] Erro ao atualizar job: {e}")
            raise StorageError("Erro ao atualizar job", {"job_id": job.id}) from e

    def delete(self, job_id: str) -> None:
        try:
            with self.session_factory() as db:
                deleted = db.query(JobRecord).filter(JobRecord.id == job_id).delete(synchronize_session=False)
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"[{job_id}] Erro ao remover job: {e}")
            raise StorageError("Erro ao remover job", {"job_id": job_id}) from e
        if deleted == 0:
            raise StorageError("Nenhum job removido", {"job_id": job_id})

    def _query(self, *statuses: TranscriptionStatus) -> List[Job]:
        try:
            with self.session_factory() as db:
                query = db.query(JobRecord)
                if statuses:
                    query = query.filter(JobRecord.status.in_(statuses))
                return [self._to_job(r) for r in query.order_by(JobRecord.created_at.desc()).all()]
        except SQLAlchemyError as e:
            logger.error(f"Erro ao listar jobs: {e}")
            raise StorageError("Erro ao listar jobs") from e

    @staticmethod
    def _to_values(job: Job) -> Dict[str, Any]:
        return {
            "status": job.status,
            "task": job.task,
            "file_name": job.file_name,
            "source_url": job.source_url,
            "language": job.language,
            "model_size": job.model_size,
            "device": job.device,
            "beam_size": job.beam_size,
            "initial_prompt": job.initial_prompt,
            "hotwords": list(job.hotwords),
            "result": job.result.model_dump(mode="json") if job.result else None,
            "translations": [t.model_dump(mode="json") for t in job.translations],
            "error_message": job.error_message,
        }

    @staticmethod
    def _to_job(record: JobRecord) -> Job:
        return Job.model_validate(record.to_dict())
