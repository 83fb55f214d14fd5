"""FastAPI routes proxying speech, transcription and embedding calls."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile

from config import EMBED_ROUTE, SPEAK_ROUTE, TRANSCRIBE_ROUTE
from llm_gateway import LlmGatewayError, embed_text, synthesize_speech, transcribe_audio
from services import RunLogger, truncate_text
from storage import RecordNotFound

from .auth import current_user
from .deps import AppServices, get_services
from .schemas import EmbedRequest, EmbedResponse, SpeakRequest, TranscriptionResponse
from .validation import check_audio, check_embed, check_speech

router = APIRouter(prefix="/api")


@router.post("/transcribe", response_model=TranscriptionResponse)
def transcribe(
    audio: Optional[UploadFile] = File(default=None),
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> TranscriptionResponse:
    cfg = services.settings
    data = audio.file.read() if audio is not None else None
    extension = check_audio(
        data,
        audio.filename if audio is not None else None,
        audio.content_type if audio is not None else None,
        max_bytes=cfg.MAX_AUDIO_BYTES,
    )
    route = services.route(TRANSCRIBE_ROUTE)
    run = RunLogger(services.runs, user_id, "transcribe", route.model)
    run_input = {"audio_size_bytes": len(data), "audio_format": extension}
    try:
        result = transcribe_audio(
            data,
            filename=f"audio.{extension}",
            content_type=audio.content_type or f"audio/{extension}",
            cfg=route,
            client=services.http,
        )
    except LlmGatewayError as exc:
        run.failure(model=route.model, input=run_input, error=str(exc))
        raise
    run.success(
        model=result.model,
        input=run_input,
        output={"text_length": len(result.text)},
        latency_ms=result.latency_ms,
    )
    return TranscriptionResponse(text=result.text)


@router.post("/speak", response_class=Response)
def speak(
    req: SpeakRequest,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> Response:
    cfg = services.settings
    text, voice = check_speech(
        req.text,
        req.voice,
        max_chars=cfg.SPEAK_MAX_CHARS,
        default_voice=cfg.SPEAK_DEFAULT_VOICE,
    )
    route = services.route(SPEAK_ROUTE)
    run = RunLogger(services.runs, user_id, "speak", route.model)
    run_input = {"text": truncate_text(text, cfg.TELEMETRY_TEXT_CHARS), "voice": voice}
    try:
        speech = synthesize_speech(text, voice=voice, cfg=route, client=services.http)
    except LlmGatewayError as exc:
        run.failure(model=route.model, input=run_input, error=str(exc))
        raise
    run.success(model=speech.model, input=run_input, output={"bytes": len(speech.audio)}, latency_ms=speech.latency_ms)
    return Response(content=speech.audio, media_type=speech.media_type)


@router.post("/embed", response_model=EmbedResponse)
def embed(
    req: EmbedRequest,
    user_id: str = Depends(current_user),
    services: AppServices = Depends(get_services),
) -> EmbedResponse:
    cfg = services.settings
    text, kind = check_embed(req.text, req.type)
    if req.bullet_id:
        bullet = services.bullets.get_bullet(req.bullet_id)
        if bullet is None or bullet.user_id != user_id:
            raise RecordNotFound(f"bullet {req.bullet_id} not found")
    route = services.route(EMBED_ROUTE)
    run = RunLogger(services.runs, user_id, "embed", route.model)
    run_input = {"text": truncate_text(text, cfg.TELEMETRY_TEXT_CHARS), "type": kind}
    try:
        result = embed_text(text, cfg=route, client=services.http, max_chars=cfg.EMBED_MAX_CHARS)
    except LlmGatewayError as exc:
        run.failure(model=route.model, input=run_input, error=str(exc))
        raise
    run.success(
        model=result.model,
        input=run_input,
        output={"dimensions": len(result.vector)},
        latency_ms=result.latency_ms,
        tokens_in=result.tokens,
    )
    if req.bullet_id and kind == "bullet":
        services.bullets.set_embedding(req.bullet_id, result.vector)
    return EmbedResponse(embedding=result.vector)
