"""Input checks for the speech, transcription and embedding endpoints."""
from __future__ import annotations

from typing import Optional, Tuple

from .errors import ValidationFailure

VALID_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
AUDIO_FORMATS = ("mp3", "mp4", "mpeg", "mpga", "m4a", "wav", "webm")
EMBED_TYPES = ("jd", "bullet")
DEFAULT_AUDIO_FORMAT = "webm"


def check_speech(
    text: Optional[str],
    voice: Optional[str],
    *,
    max_chars: int = 4096,
    default_voice: str = "nova",
) -> Tuple[str, str]:
    """Return ``(text, voice)`` or raise :class:`ValidationFailure`."""

    if text is None or not isinstance(text, str):
        raise ValidationFailure("Text is required and must be a string")
    if not text:
        raise ValidationFailure("Text cannot be empty")
    if len(text) > max_chars:
        raise ValidationFailure(f"Text exceeds maximum length of {max_chars} characters")
    voice = voice or default_voice
    if voice not in VALID_VOICES:
        raise ValidationFailure(f"Invalid voice. Must be one of: {', '.join(VALID_VOICES)}")
    return text, voice


def audio_format(filename: Optional[str], content_type: Optional[str]) -> str:
    """Pick the audio format from the file name, then the MIME subtype."""

    if filename and "." in filename:
        return filename.rsplit(".", 1)[1].lower()
    if content_type and "/" in content_type:
        return content_type.split("/", 1)[1].split(";", 1)[0].strip().lower()
    return DEFAULT_AUDIO_FORMAT


def check_audio(
    data: Optional[bytes],
    filename: Optional[str],
    content_type: Optional[str],
    *,
    max_bytes: int = 25 * 1024 * 1024,
) -> str:
    """Return the audio format or raise :class:`ValidationFailure`."""

    if data is None:
        raise ValidationFailure('Audio file is required in the "audio" field')
    if len(data) > max_bytes:
        raise ValidationFailure(f"Audio file exceeds maximum size of {max_bytes // (1024 * 1024)}MB")
    extension = audio_format(filename, content_type)
    if extension not in AUDIO_FORMATS:
        raise ValidationFailure(
            f"Unsupported audio format: {extension}. Supported formats: {', '.join(AUDIO_FORMATS)}"
        )
    return extension


def check_embed(text: Optional[str], kind: Optional[str]) -> Tuple[str, str]:
    if not text or not isinstance(text, str):
        raise ValidationFailure("Text is required")
    if kind not in EMBED_TYPES:
        raise ValidationFailure(f"Type must be one of: {', '.join(EMBED_TYPES)}")
    return text, kind


__all__ = [
    "AUDIO_FORMATS",
    "EMBED_TYPES",
    "VALID_VOICES",
    "audio_format",
    "check_audio",
    "check_embed",
    "check_speech",
]
