from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from fastapi import Depends
from loguru import logger
from openai import OpenAI, OpenAIError
from starlette.datastructures import UploadFile

from .config import Settings, get_settings
from .errors import UpstreamServiceError
from .prompts import (
    FITNESS_INSTRUCTOR_PROMPT,
    build_transcription_prompt,
    build_workout_prompt,
)
from .schemas import WorkoutRequest

_clients: dict[str, OpenAI] = {}


def get_openai_client(settings: Settings = Depends(get_settings)) -> OpenAI:
    client = _clients.get(settings.openai_api_key)
    if client is None:
        client = OpenAI(api_key=settings.openai_api_key)
        _clients[settings.openai_api_key] = client
    return client


async def transcribe_audio(
    client: OpenAI,
    file: UploadFile,
    *,
    step: Optional[int],
    model: str,
) -> str:
    filename = Path(file.filename or "recording.wav").name
    data = await file.read()
    prompt = build_transcription_prompt(step)
    logger.debug(f"Transcribing {filename} ({len(data)} bytes) for step {step}")
    try:
        transcript: Any = client.audio.transcriptions.create(
            model=model,
            file=(filename, data),
            prompt=prompt,
            response_format="text",
        )
    except OpenAIError as exc:
        logger.error(f"Transcription request failed: {exc}")
        raise UpstreamServiceError(str(exc) or "Transcription failed") from exc

    text = transcript if isinstance(transcript, str) else getattr(transcript, "text", "")
    if not text or not text.strip():
        logger.warning(f"Transcription of {filename} returned no text")
        raise UpstreamServiceError("No transcript generated")
    logger.debug("Transcription completed")
    return text.strip()


def build_workout_messages(request: WorkoutRequest) -> list[dict[str, str]]:
    prompt = build_workout_prompt(
        request.time, request.energy_level, request.desired_outcome
    )
    return [
        {"role": "system", "content": FITNESS_INSTRUCTOR_PROMPT},
        {"role": "user", "content": prompt},
    ]


def open_workout_stream(
    client: OpenAI,
    request: WorkoutRequest,
    *,
    model: str,
) -> Iterator[str]:
    """
    Start a streamed chat completion for the workout plan.

    The provider call happens here, so connection and authentication errors
    surface before any response bytes are sent. The returned iterator yields
    text deltas in the order the provider produces them.
    """
    logger.debug(f"Requesting workout plan from {model}")
    try:
        stream = client.chat.completions.create(
            model=model,
            messages=build_workout_messages(request),
            stream=True,
        )
    except OpenAIError as exc:
        logger.error(f"Workout generation request failed: {exc}")
        raise UpstreamServiceError(str(exc) or "Workout generation failed") from exc
    return relay_text_chunks(stream)


def relay_text_chunks(stream: Iterable[Any]) -> Iterator[str]:
    delivered = 0
    try:
        for chunk in stream:
            choices = getattr(chunk, "choices", None) or []
            if not choices:
                continue
            content = getattr(choices[0].delta, "content", None)
            if content:
                delivered += 1
                yield content
    except OpenAIError as exc:
        # Headers are already sent, so the error ends the body mid-stream.
        logger.error(f"Workout stream interrupted after {delivered} chunks: {exc}")
        raise
    logger.debug(f"Workout stream finished after {delivered} chunks")
