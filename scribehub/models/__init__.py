from .transcription import (
    TranscriptionStatus,
    RUNNING_STATUSES,
    Device,
    Segment,
    TranscriptionResult,
    Translation,
    ServiceStatus,
)
from .job import Job, JobUpdate, ResultUpload

__all__ = [
    "TranscriptionStatus",
    "RUNNING_STATUSES",
    "Device",
    "Segment",
    "TranscriptionResult",
    "Translation",
    "ServiceStatus",
    "Job",
    "JobUpdate",
    "ResultUpload",
]
