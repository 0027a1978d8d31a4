from fastapi import APIRouter, HTTPException, Depends, Form, Query
from fastapi.responses import Response
from typing import List, Optional
import logging
import json
from ..dependencies import get_controller
from ...models.job import Job, JobUpdate
from ...models.transcription import TranscriptionStatus
from ...services.lifecycle import JobLifecycleController

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/transcriptions", response_model=List[Job])
async def list_transcriptions(controller: JobLifecycleController = Depends(get_controller)):
    """Lista todas as transcrições"""
    return await controller.list()


@router.get("/transcriptions/{job_id}", response_model=Job)
async def get_transcription(job_id: str, controller: JobLifecycleController = Depends(get_controller)):
    """Consulta o status e resultado de uma transcrição"""
    return await controller.get(job_id)


@router.patch("/transcriptions", response_model=Job)
async def patch_transcription(update: JobUpdate, controller: JobLifecycleController = Depends(get_controller)):
    return await controller.update(update)


@router.delete("/transcriptions/{job_id}")
async def delete_transcription(job_id: str, controller: JobLifecycleController = Depends(get_controller)):
    await controller.delete(job_id)
    return {"message": "Job removido com sucesso", "job_id": job_id}


@router.post("/rename/{job_id}", response_model=Job)
async def rename_file(
        job_id: str,
        new_file_name: str = Form(default="", alias="newFileName"),
        controller: JobLifecycleController = Depends(get_controller)
):
    return await controller.rename(job_id, new_file_name)


@router.get("/translate/{job_id}/{target}", response_model=Job)
async def translate_transcription(
        job_id: str,
        target: str,
        controller: JobLifecycleController = Depends(get_controller)
):
    return await controller.translate(job_id, target)


@router.get("/transcriptions/{job_id}/download")
async def download_transcription(
        job_id: str,
        format: str = Query(default="txt", description="Formato do download: txt, json, srt, vtt"),
        controller: JobLifecycleController = Depends(get_controller)
):
    """Download do resultado da transcrição em diferentes formatos"""

    job = await controller.get(job_id)

    if job.status != TranscriptionStatus.DONE:
        raise HTTPException(
            status_code=400,
            detail=f"Transcrição não concluída. Status atual: {job.status.value}"
        )

    if job.result is None:
        raise HTTPException(status_code=404, detail="Resultado da transcrição não disponível")

    segments = [s.model_dump() for s in job.result.segments]

    if format == "txt":
        content = job.result.text
        media_type = "text/plain"
    elif format == "json":
        content = json.dumps(job.result.model_dump(mode="json"), indent=2, ensure_ascii=False)
        media_type = "application/json"
    elif format == "srt":
        content = _convert_to_srt(segments)
        media_type = "text/plain"
    elif format == "vtt":
        content = _convert_to_vtt(segments)
        media_type = "text/plain"
    else:
        raise HTTPException(status_code=400, detail="Formato não suportado. Use: txt, json, srt, vtt")

    filename = f"transcription_{job_id}.{format}"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


def _convert_to_srt(segments: list) -> str:
    """Converte segmentos para formato SRT"""
    srt_content = []

    for i, segment in enumerate(segments, 1):
        start_time = _format_timestamp(segment.get("start", 0), ",")
        end_time = _format_timestamp(segment.get("end", 0), ",")

        srt_content.append(f"{i}")
        srt_content.append(f"{start_time} --> {end_time}")
        srt_content.append(segment.get("text", "").strip())
        srt_content.append("")

    return "\n".join(srt_content)


def _convert_to_vtt(segments: list) -> str:
    """Converte segmentos para formato WebVTT"""
    vtt_content = ["WEBVTT", ""]

    for segment in segments:
        start_time = _format_timestamp(segment.get("start", 0), ".")
        end_time = _format_timestamp(segment.get("end", 0), ".")

        vtt_content.append(f"{start_time} --> {end_time}")
        vtt_content.append(segment.get("text", "").strip())
        vtt_content.append("")

    return "\n".join(vtt_content)


def _format_timestamp(seconds: float, ms_separator: str) -> str:
    """HH:MM:SS,mmm (SRT) ou HH:MM:SS.mmm (WebVTT)"""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    milliseconds = int(round((seconds % 1) * 1000))
    if milliseconds == 1000:
        milliseconds = 999

    return f"{hours:02d}:{minutes:02d}:{secs:02d}{ms_separator}{milliseconds:03d}"
