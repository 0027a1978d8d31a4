import re
import uuid
from datetime import datetime
from typing import Optional, Tuple

# Separa o prefixo de identidade (time id ou job id) da parte legível do nome
FILENAME_SEPARATOR = "_SCRB_"

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


def generate_job_id() -> str:
    """Gera ID único para job"""
    return str(uuid.uuid4())


def generate_time_id(now: Optional[datetime] = None) -> str:
    """Prefixo baseado no instante do upload, com milissegundos"""
    now = now or datetime.now()
    return now.strftime("%Y_%m_%d-%H%M%S") + f"{now.microsecond // 1000:03d}"


def sanitize_filename(filename: str) -> str:
    """Remove caracteres problemáticos do nome do arquivo"""
    filename = filename.strip()
    filename = filename.strip("\"'.")
    return _NON_ALNUM_RE.sub("_", filename)


def build_file_name(prefix: str, human_part: str) -> str:
    return f"{prefix}{FILENAME_SEPARATOR}{human_part}"


def split_file_name(file_name: str) -> Optional[Tuple[str, str]]:
    """Separa prefixo e parte legível; None se o separador não existir"""
    if not file_name or FILENAME_SEPARATOR not in file_name:
        return None
    prefix, human_part = file_name.split(FILENAME_SEPARATOR, 1)
    return prefix, human_part


def upload_file_name(original_filename: Optional[str], now: Optional[datetime] = None) -> str:
    """Nome no disco para um upload; sem nome original usa um timestamp"""
    time_id = generate_time_id(now)
    human_part = original_filename or (now or datetime.now()).strftime("%Y_%m_%d-%H%M%S")
    return build_file_name(time_id, human_part)
