import asyncio
import os
import tempfile
import yt_dlp
import aiohttp
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse
import logging

from ..errors import DownloadError

logger = logging.getLogger(__name__)


@dataclass
class DownloadedMedia:
    path: Path
    title: str


class URLDownloader:
    """Baixa mídia remota para um diretório temporário.

    URLs que apontam diretamente para áudio/vídeo são baixadas com aiohttp;
    as restantes (YouTube, etc.) passam pelo yt-dlp.
    """

    def __init__(self, temp_dir: Optional[Union[str, Path]] = None):
        self.temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()) / "transcription_downloads"
        self.temp_dir.mkdir(parents=True, exist_ok=True)

    async def download(self, url: str, job_id: str) -> DownloadedMedia:
        """Download de áudio/vídeo de URL"""

        # Primeiro tenta download direto (para arquivos simples)
        if await self._is_direct_media_url(url):
            return await self._download_direct(url, job_id)

        # Se não for URL direta, usa yt-dlp (YouTube, etc.)
        return await self._download_with_ytdlp(url, job_id)

    async def _is_direct_media_url(self, url: str) -> bool:
        """Verifica se é URL direta para arquivo de mídia"""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.head(url, allow_redirects=True) as response:
                    content_type = response.headers.get('Content-Type', '')
                    return content_type.startswith(('audio/', 'video/'))
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug(f"HEAD falhou para {url}: {e}")
            return False

    async def _download_direct(self, url: str, job_id: str) -> DownloadedMedia:
        """Download direto de arquivo de mídia"""
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(url) as response:
                    response.raise_for_status()

                    # Determinar extensão baseada no Content-Type
                    content_type = response.headers.get('Content-Type', '').split(';')[0].strip()
                    extension = self._get_extension_from_mime(content_type)
                    final_path = self.temp_dir / f"{job_id}_direct_download{extension}"

                    with open(final_path, 'wb') as f:
                        async for chunk in response.content.iter_chunked(8192):
                            f.write(chunk)

            return DownloadedMedia(path=final_path, title=self._title_from_url(url))

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            logger.error(f"[{job_id}] Erro no download direto: {e}")
            raise DownloadError(f"Falha no download direto: {e}", {"url": url}) from e

    async def _download_with_ytdlp(self, url: str, job_id: str) -> DownloadedMedia:
        """Download usando yt-dlp (YouTube, etc.)"""
        ydl_opts = {
            'format': 'bestaudio/best',
            'outtmpl': str(self.temp_dir / f"{job_id}.%(ext)s"),
            'no_warnings': True,
            'quiet': True,
            'noplaylist': True,
        }

        def download():
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                info = ydl.extract_info(url, download=True)
                return info, ydl.prepare_filename(info)

        try:
            # Executar download em thread separada para não bloquear
            loop = asyncio.get_running_loop()
            info, file_path = await loop.run_in_executor(None, download)
        except (yt_dlp.utils.YoutubeDLError, OSError) as e:
            logger.error(f"[{job_id}] Erro no download com yt-dlp: {e}")
            raise DownloadError(f"Falha no download: {e}", {"url": url}) from e

        path = Path(file_path)
        if not path.is_file():
            # Pós-processamento pode ter mudado a extensão
            path = next((p for p in self.temp_dir.glob(f"{job_id}.*") if p.is_file()), None)
        if path is None:
            raise DownloadError("Arquivo baixado não encontrado", {"url": url})

        return DownloadedMedia(path=path, title=info.get("title") or job_id)

    def _title_from_url(self, url: str) -> str:
        name = Path(unquote(urlparse(url).path)).stem
        return name or urlparse(url).netloc

    def _get_extension_from_mime(self, mime_type: str) -> str:
        """Converte MIME type para extensão de arquivo"""
        mime_to_ext = {
            'audio/mpeg': '.mp3',
            'audio/wav': '.wav',
            'audio/ogg': '.ogg',
            'audio/flac': '.flac',
            'audio/aac': '.aac',
            'video/mp4': '.mp4',
            'video/webm': '.webm',
            'video/ogg': '.ogv'
        }
        return mime_to_ext.get(mime_type, '.tmp')

    async def cleanup_download(self, file_path: Union[str, Path]) -> bool:
        """Remove arquivo baixado"""
        try:
            os.remove(file_path)
            return True
        except OSError as e:
            logger.warning(f"Erro ao remover download temporário {file_path}: {e}")
            return False
