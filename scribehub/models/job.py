from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from .transcription import TranscriptionStatus, TranscriptionResult, Translation


class Job(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    status: TranscriptionStatus = TranscriptionStatus.PENDING
    task: str = "transcribe"
    file_name: Optional[str] = None
    source_url: Optional[str] = None
    language: str = "auto"
    model_size: str = "small"
    device: str = "cpu"
    beam_size: Optional[int] = None
    initial_prompt: Optional[str] = None
    hotwords: List[str] = Field(default_factory=list)
    result: Optional[TranscriptionResult] = None
    translations: List[Translation] = Field(default_factory=list)
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobUpdate(BaseModel):
    """Atualização parcial de um job: só os campos enviados são aplicados."""

    id: str
    status: Optional[TranscriptionStatus] = None
    file_name: Optional[str] = None
    source_url: Optional[str] = None
    language: Optional[str] = None
    model_size: Optional[str] = None
    device: Optional[str] = None
    beam_size: Optional[int] = None
    initial_prompt: Optional[str] = None
    hotwords: Optional[List[str]] = None
    result: Optional[TranscriptionResult] = None
    translations: Optional[List[Translation]] = None
    error_message: Optional[str] = None


class ResultUpload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcription_id: str = Field(default="", alias="transcriptionId")
    result: Optional[dict] = None
