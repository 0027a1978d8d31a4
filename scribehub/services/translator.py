import os
import logging
from typing import Optional

import httpx

from ..errors import TranslationError, ValidationError
from ..models.transcription import Segment, TranscriptionResult, Translation

logger = logging.getLogger(__name__)


class TranslationClient:
    """Cliente de um serviço compatível com LibreTranslate (`POST /translate`)."""

    def __init__(self, endpoint: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self.endpoint = endpoint or os.getenv("TRANSLATION_ENDPOINT", "localhost:5000")
        self.base_url = f"http://{self.endpoint}"
        self.client = client or httpx.AsyncClient(timeout=60.0)

    async def translate_text(self, text: str, source: str, target: str) -> str:
        url = f"{self.base_url}/translate"
        payload = {"q": text, "source": source, "target": target, "format": "text"}
        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            return response.json()["translatedText"]
        except httpx.HTTPStatusError as e:
            logger.error(f"Erro na tradução | Status: {e.response.status_code} | Detalhes: {e.response.text}")
            raise TranslationError(f"Erro na tradução: Status={e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Erro ao contactar o serviço de tradução: {e}")
            raise TranslationError(f"Serviço de tradução inacessível: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            raise TranslationError("Resposta inválida do serviço de tradução") from e

    async def translate(self, result: TranscriptionResult, target: str) -> Translation:
        """Traduz o texto completo e cada segmento, mantendo os tempos"""
        if not result.language:
            raise ValidationError("Idioma de origem desconhecido")

        text = await self.translate_text(result.text, result.language, target)
        segments = []
        for segment in result.segments:
            translated = await self.translate_text(segment.text, result.language, target)
            segments.append(Segment.model_validate({**segment.model_dump(), "text": translated}))

        return Translation(
            source_language=result.language,
            target_language=target,
            text=text,
            segments=segments,
        )

    async def close(self):
        await self.client.aclose()
