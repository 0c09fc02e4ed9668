"""
AI Writer Routes

The writing assistant endpoint, a streaming coach chat, and voice
dictation. Failures answer with `{error}` and the error's status code.
"""

from typing import Optional, List, Dict
import json

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from scribe.utils.logging import writer_logger
from scribe.writer import AIServiceError, TranscriptionService, WriterService, available_actions
from .auth import get_current_user_id
from .dependencies import get_transcription_service, get_writer_service

router = APIRouter(prefix="/api/ai", tags=["ai"])


# =============================================================================
# Request/Response Models
# =============================================================================

class WriterRequest(BaseModel):
    """A writing action on the author's text."""
    action: str
    text: Optional[str] = None
    context: Optional[str] = None
    prompt: Optional[str] = None


class WriterResponse(BaseModel):
    result: str


class ChatMessage(BaseModel):
    role: str  # user, assistant
    content: str


class ChatRequest(BaseModel):
    message: str
    history: List[ChatMessage] = []


class TranscribeRequest(BaseModel):
    audio: str


def _error_response(error: AIServiceError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


# =============================================================================
# Routes
# =============================================================================

@router.get("/actions")
async def list_actions():
    """Action tags the writer accepts."""
    return {"actions": available_actions()}


@router.post("/writer", response_model=WriterResponse)
async def run_writer(
    request: WriterRequest,
    user_id: str = Depends(get_current_user_id),
    writer: WriterService = Depends(get_writer_service),
):
    """
    Run one writing action and return the generated text.

    Rate limiting answers 429 and exhausted credits 402, each with a
    message meant for the author.
    """
    try:
        result = await writer.run(
            request.action,
            text=request.text,
            context=request.context,
            prompt=request.prompt,
        )
    except AIServiceError as e:
        writer_logger.warning("AI writer request failed", action=request.action, status=e.status_code)
        return _error_response(e)

    return WriterResponse(result=result)


@router.post("/chat/stream")
async def chat_stream(
    request: ChatRequest,
    user_id: str = Depends(get_current_user_id),
    writer: WriterService = Depends(get_writer_service),
):
    """
    Talk to the writing coach, streamed as Server-Sent Events.
    """
    history: List[Dict[str, str]] = [m.model_dump() for m in request.history]

    async def generate():
        try:
            async for chunk in writer.chat_stream(request.message, history):
                token_data = json.dumps({"type": "token", "content": chunk})
                yield f"data: {token_data}\n\n"

            yield f"data: {json.dumps({'type': 'done'})}\n\n"
        except AIServiceError as e:
            error_data = json.dumps({"type": "error", "message": e.message, "status": e.status_code})
            yield f"data: {error_data}\n\n"

    return StreamingResponse(
        generate(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


@router.post("/transcribe")
async def transcribe(
    request: TranscribeRequest,
    user_id: str = Depends(get_current_user_id),
    transcriber: TranscriptionService = Depends(get_transcription_service),
):
    """Transcribe base64 audio for dictation."""
    try:
        text = await transcriber.transcribe(request.audio)
    except AIServiceError as e:
        return _error_response(e)
    return {"text": text}
