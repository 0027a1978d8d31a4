"""Tipos de erro da aplicação."""

from typing import Any, Dict, Optional


class ScribeHubError(Exception):
    """Erro estruturado que mapeia diretamente para uma resposta HTTP."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class ValidationError(ScribeHubError):
    status_code = 400
    code = "VALIDATION_ERROR"


class ResultValidationError(ValidationError):
    """Resultado de transcrição incompleto; `field` indica o campo em falta."""

    code = "RESULT_INVALID"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Missing required field: {field}", {"field": field})


class JobNotFoundError(ScribeHubError):
    status_code = 404
    code = "JOB_NOT_FOUND"

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__("Job não encontrado", {"job_id": job_id})


class JobNotModifiedError(ScribeHubError):
    status_code = 304
    code = "JOB_NOT_MODIFIED"

    def __init__(self, job_id: Optional[str]):
        self.job_id = job_id
        super().__init__("No changes were made", {"job_id": job_id})


class InvalidTransitionError(ScribeHubError):
    status_code = 409
    code = "FSM_TRANSITION_INVALID"


class InvalidFilenameFormatError(ScribeHubError):
    status_code = 500
    code = "INVALID_FILENAME_FORMAT"


class StorageError(ScribeHubError):
    """Falha na camada de persistência.

    `rollback_error` fica preenchido quando uma compensação (por exemplo,
    desfazer um rename em disco) também falhou.
    """

    status_code = 500
    code = "STORAGE_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 rollback_error: Optional[str] = None):
        self.rollback_error = rollback_error
        details = dict(details or {})
        if rollback_error:
            details["rollback_error"] = rollback_error
        super().__init__(message, details)


class DownloadError(ScribeHubError):
    status_code = 502
    code = "DOWNLOAD_FAILED"


class MediaIOError(ScribeHubError):
    status_code = 500
    code = "MEDIA_IO_ERROR"


class ASRServiceError(ScribeHubError):
    """Resposta não-2xx do serviço de transcrição; guarda o corpo para diagnóstico."""

    status_code = 502
    code = "ASR_SERVICE_ERROR"

    def __init__(self, upstream_status: Optional[int], body: str):
        self.upstream_status = upstream_status
        self.body = body
        if upstream_status is None:
            message = "Serviço de transcrição inacessível"
        else:
            message = f"Serviço de transcrição respondeu com status {upstream_status}"
        super().__init__(message, {"upstream_status": upstream_status, "body": body})


class ASRDecodeError(ScribeHubError):
    status_code = 502
    code = "ASR_DECODE_ERROR"


class TranslationError(ScribeHubError):
    status_code = 502
    code = "TRANSLATION_FAILED"


__all__ = [
    "ScribeHubError",
    "ValidationError",
    "ResultValidationError",
    "JobNotFoundError",
    "JobNotModifiedError",
    "InvalidTransitionError",
    "InvalidFilenameFormatError",
    "StorageError",
    "DownloadError",
    "MediaIOError",
    "ASRServiceError",
    "ASRDecodeError",
    "TranslationError",
]
