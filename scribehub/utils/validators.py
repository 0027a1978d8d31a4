import logging
import os
from typing import List, Optional

from ..errors import ResultValidationError, ValidationError
from ..models.transcription import Device, TranscriptionResult

logger = logging.getLogger(__name__)

SUPPORTED_DEVICES = {d.value for d in Device}


def normalize_device(device: Optional[str]) -> str:
    """Devolve o device pedido ou `cpu` quando não é suportado"""
    if device in SUPPORTED_DEVICES:
        return device
    logger.warning(f"Device {device!r} não suportado, usando cpu")
    return Device.CPU.value


def parse_beam_size(value: Optional[str]) -> Optional[int]:
    """Converte o beam size; valores não numéricos ou negativos são ignorados"""
    if value is None or str(value).strip() == "":
        return None
    try:
        beam_size = int(str(value).strip())
    except ValueError:
        return None
    return beam_size if beam_size >= 0 else None


def split_and_trim(value: str, sep: str = ",") -> List[str]:
    """Divide por `sep` e remove espaços de cada parte, mantendo as partes vazias"""
    return [part.strip() for part in value.split(sep)]


def parse_hotwords(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [hw for hw in split_and_trim(value, ",") if hw != ""]


def validate_result(result: Optional[TranscriptionResult]) -> TranscriptionResult:
    """Garante que language, text e segments estão preenchidos"""
    if result is None:
        raise ValidationError("result is required")
    if not result.language:
        raise ResultValidationError("language")
    if not result.text:
        raise ResultValidationError("text")
    if len(result.segments) == 0:
        raise ResultValidationError("segments")
    return result


def validate_new_file_name(name: Optional[str]) -> str:
    if not name:
        raise ValidationError("New file name is required")
    if os.sep in name or "/" in name or name in (".", ".."):
        raise ValidationError("Nome de arquivo inválido")
    return name
