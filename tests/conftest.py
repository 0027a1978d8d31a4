"""Fixtures partilhadas pelos testes."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from scribehub.database.connection import build_engine, build_session_factory, create_db_and_tables
from scribehub.database.store import JobStore
from scribehub.errors import TranslationError
from scribehub.models.job import Job
from scribehub.models.transcription import Segment, TranscriptionResult, TranscriptionStatus, Translation
from scribehub.services.file_handler import FileHandler
from scribehub.services.job_cache import JobCache
from scribehub.services.lifecycle import JobLifecycleController
from scribehub.services.notifier import ConnectionManager
from scribehub.services.url_downloader import DownloadedMedia
from scribehub.services.work_queue import JobQueue


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_result(language: str = "en", text: str = "hello world") -> TranscriptionResult:
    return TranscriptionResult(
        language=language,
        text=text,
        segments=[
            Segment(id=0, start=0.0, end=1.2, text="hello"),
            Segment(id=1, start=1.2, end=2.5, text="world"),
        ],
    )


class FakeConnection:
    """Observador falso: guarda o que recebe, ou falha/atrasa o envio."""

    def __init__(self, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.sent: list[str] = []

    async def send_text(self, data: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


class FakeTranslator:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[str] = []

    async def translate(self, result: TranscriptionResult, target: str) -> Translation:
        self.calls.append(target)
        if self.fail:
            raise TranslationError("translation service down")
        return Translation(
            source_language=result.language,
            target_language=target,
            text=f"[{target}] {result.text}",
            segments=result.segments,
        )

    async def close(self) -> None:
        pass


class FakeDownloader:
    def __init__(self, workdir: Path, title: str = "Some Title", payload: bytes = b"media-bytes",
                 error: Exception | None = None):
        self.workdir = workdir
        self.workdir.mkdir(parents=True, exist_ok=True)
        self.title = title
        self.payload = payload
        self.error = error
        self.cleaned: list[Path] = []

    async def download(self, url: str, job_id: str) -> DownloadedMedia:
        if self.error:
            raise self.error
        path = self.workdir / f"{job_id}.download"
        path.write_bytes(self.payload)
        return DownloadedMedia(path=path, title=self.title)

    async def cleanup_download(self, file_path) -> bool:
        path = Path(file_path)
        self.cleaned.append(path)
        path.unlink(missing_ok=True)
        return True


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def store(session_factory) -> JobStore:
    return JobStore(session_factory)


@pytest.fixture
def notifier() -> ConnectionManager:
    return ConnectionManager(send_timeout=0.5)


@pytest.fixture
def file_handler(tmp_path) -> FileHandler:
    return FileHandler(tmp_path / "uploads")


@pytest.fixture
def queue() -> JobQueue:
    return JobQueue(maxsize=10, overflow="block")


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def controller(store, notifier, file_handler, queue, translator) -> JobLifecycleController:
    return JobLifecycleController(
        store,
        notifier,
        file_handler,
        queue,
        translator=translator,
        cache=JobCache(),
        translation_failure_terminal=False,
    )


@pytest.fixture
def observer(notifier) -> FakeConnection:
    connection = FakeConnection()
    notifier._connections.append(connection)
    return connection


def seed_job(store: JobStore, job_id: str, status: TranscriptionStatus, **fields) -> Job:
    return store.create(Job(id=job_id, status=status, **fields))
