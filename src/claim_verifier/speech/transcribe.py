"""Speech-to-text proxy.

Forwards recorded audio to the OpenAI transcription API and returns the text.
"""

from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings
from ..errors import ConfigurationError, TranscriptionError
from ..log import get_logger
from ..schemas.outputs import TranscriptionResult

logger = get_logger("transcribe")

class Transcriber:
    def __init__(self, api_key: str, model: str = "whisper-1", http_client: Optional[httpx.AsyncClient] = None):
        self.client = AsyncOpenAI(api_key=api_key, max_retries=0, http_client=http_client)
        self.model = model

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Transcriber":
        settings = settings or get_settings()
        if not settings.OPENAI_API_KEY:
            raise ConfigurationError("OPENAI_API_KEY not configured")
        return cls(api_key=settings.OPENAI_API_KEY, model=settings.TRANSCRIPTION_MODEL)

    async def aclose(self) -> None:
        await self.client.close()

    async def transcribe(
        self,
        audio: bytes,
        language: str,
        filename: str = "recording.webm",
        content_type: Optional[str] = None,
    ) -> TranscriptionResult:
        logger.info(f"Transcribing audio: {len(audio)} bytes, language '{language}'")
        try:
            result = await self.client.audio.transcriptions.create(
                file=(filename, audio, content_type or "application/octet-stream"),
                model=self.model,
                language=language,
                response_format="json",
            )
        except openai.APIStatusError as e:
            logger.error(f"Transcription API error {e.status_code}: {e.message}")
            raise TranscriptionError(f"Transcription failed: {e.status_code}") from e
        except openai.APIError as e:
            raise TranscriptionError(f"Transcription failed: {e}") from e

        text = getattr(result, "text", None)
        if not isinstance(text, str):
            raise TranscriptionError("Transcription response contained no text")

        logger.info(f"Transcription successful: {text[:100]!r}")
        return TranscriptionResult(text=text, language=getattr(result, "language", None) or language)
