from fastapi import APIRouter, UploadFile, File, Form, Depends
from typing import Optional
import logging
from ..dependencies import get_controller, get_file_handler
from ...models.job import Job, ResultUpload
from ...services.file_handler import FileHandler
from ...services.lifecycle import JobLifecycleController

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/transcriptions", response_model=Job)
async def create_transcription(
        file: Optional[UploadFile] = File(default=None),
        source_url: str = Form(default="", alias="sourceUrl"),
        language: str = Form(default="auto"),
        model_size: str = Form(default="small", alias="modelSize"),
        device: str = Form(default="cpu"),
        beam_size: Optional[str] = Form(default=None),
        initial_prompt: Optional[str] = Form(default=None),
        hotwords: Optional[str] = Form(default=None),
        controller: JobLifecycleController = Depends(get_controller),
        file_handler: FileHandler = Depends(get_file_handler)
):
    """Cria um job de transcrição a partir de um arquivo ou de uma URL"""

    file_name = None
    if not source_url and file is not None:
        logger.info(f"Recebido upload: {file.filename}")
        file_name = await file_handler.save_upload(file)
        logger.info(f"Arquivo salvo como: {file_name}")

    try:
        return await controller.create(
            file_name=file_name,
            source_url=source_url,
            language=language,
            model_size=model_size,
            device=device,
            beam_size=beam_size,
            initial_prompt=initial_prompt,
            hotwords=hotwords,
        )
    except Exception:
        # Limpar arquivo se foi salvo
        if file_name:
            await file_handler.delete_file(file_name)
            logger.info(f"Arquivo removido após erro: {file_name}")
        raise


@router.post("/upload", response_model=Job)
async def upload_result(
        upload: ResultUpload,
        controller: JobLifecycleController = Depends(get_controller)
):
    """Substitui o resultado de uma transcrição por um JSON enviado externamente"""
    return await controller.ingest_result(upload.transcription_id, upload.result)
