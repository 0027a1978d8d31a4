import asyncio
import os
from contextlib import asynccontextmanager, suppress
from typing import Optional

import httpx
import redis.asyncio as redis
from redis.exceptions import RedisError
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import sessionmaker

from .api.routes import status, transcriptions, upload, websocket
from .database.connection import build_engine, build_session_factory, create_db_and_tables
from .database.store import JobStore
from .errors import ScribeHubError
from .services.asr_client import ASRClient
from .services.file_handler import FileHandler
from .services.health import HealthProber
from .services.job_cache import JobCache
from .services.lifecycle import JobLifecycleController
from .services.media_acquirer import MediaAcquirer
from .services.notifier import ConnectionManager
from .services.translator import TranslationClient
from .services.url_downloader import URLDownloader
from .services.work_queue import JobQueue
from .services.worker import TranscriptionWorker


async def scribehub_error_handler(request: Request, exc: ScribeHubError):
    if exc.status_code == 304:
        return Response(status_code=304)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
        session_factory: Optional[sessionmaker] = None,
        upload_dir: Optional[str] = None,
        asr_client: Optional[ASRClient] = None,
        health_client: Optional[httpx.AsyncClient] = None,
        translator: Optional[TranslationClient] = None,
        downloader: Optional[URLDownloader] = None,
        enable_redis: bool = True,
        start_worker: bool = True
) -> FastAPI:
    engine = None
    if session_factory is None:
        engine = build_engine()
        session_factory = build_session_factory(engine)

    store = JobStore(session_factory)
    file_handler = FileHandler(upload_dir)
    notifier = ConnectionManager()
    queue = JobQueue()
    cache = JobCache()
    asr_client = asr_client or ASRClient()
    translator = translator or TranslationClient()
    health_prober = HealthProber(store, client=health_client)
    controller = JobLifecycleController(store, notifier, file_handler, queue, translator=translator, cache=cache)
    worker = TranscriptionWorker(
        controller,
        queue,
        MediaAcquirer(file_handler, downloader or URLDownloader()),
        asr_client
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Inicializar banco de dados
        if engine is not None:
            create_db_and_tables(engine)
            print("✅ Database initialized")

        # Inicializar Redis (opcional)
        redis_client = None
        if enable_redis:
            redis_url = os.getenv("REDIS_URL", "redis://localhost:6379")
            try:
                redis_client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
                await redis_client.ping()
                cache.redis_client = redis_client
                print("✅ Redis connected")
            except (RedisError, OSError) as e:
                print(f"⚠️ Redis not available: {e}")
                redis_client = None

        worker_task = None
        if start_worker:
            await worker.enqueue_pending()
            worker_task = asyncio.create_task(worker.run())
            print("✅ Worker started")

        yield

        # Cleanup
        if worker_task:
            worker_task.cancel()
            with suppress(asyncio.CancelledError):
                await worker_task
        if redis_client:
            await redis_client.aclose()
        await asr_client.close()
        await translator.close()
        await health_prober.close()

    app = FastAPI(
        title="ScribeHub - Transcription API",
        description="Orquestração de jobs de transcrição de áudio/vídeo",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.store = store
    app.state.file_handler = file_handler
    app.state.notifier = notifier
    app.state.queue = queue
    app.state.controller = controller
    app.state.health_prober = health_prober
    app.state.worker = worker

    app.add_exception_handler(ScribeHubError, scribehub_error_handler)

    # Mídia servida apenas para leitura (player do frontend)
    app.mount("/api/video", StaticFiles(directory=str(file_handler.upload_dir)), name="video")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Incluir rotas
    app.include_router(upload.router, prefix="/api", tags=["upload"])
    app.include_router(transcriptions.router, prefix="/api", tags=["transcriptions"])
    app.include_router(status.router, prefix="/api", tags=["status"])
    app.include_router(websocket.router, tags=["websocket"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
