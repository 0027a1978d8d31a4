from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Any
from enum import Enum


class TranscriptionStatus(str, Enum):
    PENDING = "pending"
    DOWNLOADING = "downloading"
    PROCESSING = "processing"
    TRANSCRIBING = "transcribing"
    TRANSLATING = "translating"
    DONE = "done"
    FAILED = "failed"


# Estados em que o serviço de ASR (ou tradução) pode estar ocupado com o job
RUNNING_STATUSES = (
    TranscriptionStatus.DOWNLOADING,
    TranscriptionStatus.PROCESSING,
    TranscriptionStatus.TRANSCRIBING,
    TranscriptionStatus.TRANSLATING,
)


class Device(str, Enum):
    CPU = "cpu"
    CUDA = "cuda"


class Segment(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    start: float = 0.0
    end: float = 0.0
    text: str = ""
    words: Optional[List[Any]] = None


class TranscriptionResult(BaseModel):
    """Resultado estruturado devolvido pelo serviço de ASR.

    Os campos têm valores por omissão para que a validação possa apontar
    exatamente qual deles está em falta.
    """

    model_config = ConfigDict(extra="allow")

    language: str = ""
    text: str = ""
    segments: List[Segment] = Field(default_factory=list)
    duration: Optional[float] = None


class Translation(BaseModel):
    source_language: str
    target_language: str
    text: str
    segments: List[Segment] = Field(default_factory=list)


class ServiceStatus(BaseModel):
    status: str
    service_message: str
    error: Optional[str] = None
