"""
Voice dictation: base64 audio in, transcript out.
"""

import base64
import binascii
from typing import Optional

import openai
from openai import AsyncOpenAI

from scribe.config import config
from scribe.utils.logging import writer_logger
from .errors import AIServiceError, TranscriptionError
from .service import translate_gateway_error


def decode_audio(audio: str) -> bytes:
    """
    Decode base64 audio, accepting data URLs as produced by browsers.

    Raises:
        TranscriptionError: (400) If the payload is empty or not base64
    """
    if audio and audio.startswith("data:") and "," in audio:
        audio = audio.split(",", 1)[1]
    if not audio:
        raise TranscriptionError("No audio provided", status_code=400)
    try:
        data = base64.b64decode(audio, validate=True)
    except (binascii.Error, ValueError):
        raise TranscriptionError("Audio must be base64 encoded", status_code=400)
    if not data:
        raise TranscriptionError("No audio provided", status_code=400)
    return data


class TranscriptionService:
    """Speech-to-text through the OpenAI-compatible audio endpoint."""

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not config.AI_GATEWAY_API_KEY:
                raise AIServiceError("AI gateway key is not configured")
            self._client = AsyncOpenAI(
                api_key=config.AI_GATEWAY_API_KEY,
                base_url=config.AI_GATEWAY_URL,
                max_retries=0,
            )
        return self._client

    async def transcribe(self, audio: str, filename: str = "audio.webm") -> str:
        """
        Transcribe base64-encoded audio.

        Raises:
            TranscriptionError: Bad payload or empty transcript
            AIServiceError: Provider failure
        """
        data = decode_audio(audio)
        writer_logger.info("Transcription request", audio_bytes=len(data))

        try:
            response = await self.client.audio.transcriptions.create(
                model=config.TRANSCRIPTION_MODEL,
                file=(filename, data),
            )
        except openai.OpenAIError as e:
            writer_logger.error("Transcription failed", error=str(e))
            raise translate_gateway_error(e) from e

        text = getattr(response, "text", None)
        if not text:
            raise TranscriptionError("No transcription returned")
        return text
