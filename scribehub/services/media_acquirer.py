import logging

import aiofiles

from .file_handler import CHUNK_SIZE, FileHandler
from .url_downloader import URLDownloader
from ..errors import DownloadError, MediaIOError, ValidationError
from ..models.job import Job
from ..utils.helpers import build_file_name, sanitize_filename

logger = logging.getLogger(__name__)


class MediaAcquirer:
    """Traz a mídia de um job com `source_url` para o diretório de uploads.

    O nome final é `<job id><separador><título sanitizado>`; como o id do job
    é imutável, adquirir de novo o mesmo job sobrescreve o mesmo arquivo.
    """

    def __init__(self, file_handler: FileHandler, downloader: URLDownloader):
        self.file_handler = file_handler
        self.downloader = downloader

    async def acquire(self, job: Job) -> str:
        if not job.source_url:
            raise ValidationError("source URL is empty")
        if not job.id:
            raise ValidationError("job ID is empty")

        logger.info(f"[{job.id}] Baixando mídia de {job.source_url}")
        try:
            media = await self.downloader.download(job.source_url, job.id)
        except DownloadError:
            raise
        except Exception as e:
            logger.error(f"[{job.id}] Erro no download: {e}")
            raise DownloadError(f"Falha no download: {e}", {"url": job.source_url}) from e

        file_name = build_file_name(job.id, sanitize_filename(media.title))
        target = self.file_handler.path_for(file_name)

        try:
            async with aiofiles.open(media.path, "rb") as src, aiofiles.open(target, "wb") as dst:
                while True:
                    chunk = await src.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    await dst.write(chunk)
        except OSError as e:
            logger.error(f"[{job.id}] Erro ao criar arquivo {target}: {e}")
            raise MediaIOError(f"Erro ao criar arquivo: {file_name}", {"job_id": job.id}) from e
        finally:
            await self.downloader.cleanup_download(media.path)

        logger.info(f"[{job.id}] Mídia salva como {file_name}")
        return file_name
