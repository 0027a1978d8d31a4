import os
import logging
import aiofiles
from fastapi import UploadFile
from pathlib import Path
from typing import Optional, Union

from ..errors import MediaIOError, ValidationError
from ..utils.helpers import upload_file_name

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class FileHandler:
    """Operações sobre o diretório de uploads, onde vive um arquivo por job."""

    def __init__(self, upload_dir: Optional[Union[str, Path]] = None, max_file_size: Optional[int] = None):
        self.upload_dir = Path(upload_dir or os.getenv("UPLOAD_DIR", "./uploads"))
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.max_file_size = max_file_size or int(os.getenv("MAX_FILE_SIZE", 100 * 1024 * 1024 * 1024))

    def path_for(self, file_name: str) -> Path:
        """Caminho dentro do diretório de uploads; nomes que escapam dele são recusados"""
        path = self.upload_dir / file_name
        if path.resolve().parent != self.upload_dir.resolve():
            logger.warning(f"Nome de arquivo fora do diretório de uploads: {file_name!r}")
            raise ValidationError("Nome de arquivo inválido", {"file_name": file_name})
        return path

    async def save_upload(self, file: UploadFile) -> str:
        """Salva arquivo de upload e retorna o nome gerado"""
        file_name = upload_file_name(Path(file.filename).name if file.filename else None)
        file_path = self.path_for(file_name)
        written = 0

        try:
            async with aiofiles.open(file_path, 'wb') as f:
                while True:
                    chunk = await file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_file_size:
                        break
                    await f.write(chunk)
        except OSError as e:
            logger.error(f"Erro ao salvar upload em {file_path}: {e}")
            raise MediaIOError(f"Erro ao salvar arquivo: {file_name}") from e

        if written > self.max_file_size:
            await self.delete_file(file_name)
            raise ValidationError(f"Arquivo muito grande. Máximo: {self.max_file_size // (1024 * 1024)}MB")

        return file_name

    async def delete_file(self, file_name: Optional[str]) -> bool:
        """Remove arquivo do sistema; falhas são apenas registradas"""
        if not file_name:
            return False
        try:
            file_path = self.path_for(file_name)
        except ValidationError:
            return False
        try:
            os.remove(file_path)
            return True
        except FileNotFoundError:
            logger.warning(f"Arquivo já não existe: {file_path}")
            return False
        except OSError as e:
            logger.error(f"Erro ao remover arquivo {file_path}: {e}")
            return False

    def rename_file(self, old_name: str, new_name: str) -> None:
        os.rename(self.path_for(old_name), self.path_for(new_name))
