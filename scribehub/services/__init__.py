from .asr_client import ASRClient
from .file_handler import FileHandler
from .health import HealthProber
from .job_cache import JobCache
from .lifecycle import JobLifecycleController
from .media_acquirer import MediaAcquirer
from .notifier import ConnectionManager
from .translator import TranslationClient
from .url_downloader import URLDownloader
from .work_queue import JobQueue
from .worker import TranscriptionWorker

__all__ = [
    "ASRClient",
    "FileHandler",
    "HealthProber",
    "JobCache",
    "JobLifecycleController",
    "MediaAcquirer",
    "ConnectionManager",
    "TranslationClient",
    "URLDownloader",
    "JobQueue",
    "TranscriptionWorker"
]
