from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from loguru import logger
from openai import OpenAI
from starlette.datastructures import UploadFile

from .config import Settings, get_settings
from .errors import MissingInputError, register_error_handlers
from .prompts import parse_step
from .schemas import (
    ErrorResponse,
    HealthResponse,
    TranscriptResponse,
    WorkoutRequest,
)
from .services import get_openai_client, open_workout_stream, transcribe_audio

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def create_app(settings: Settings | None = None) -> FastAPI:
    config = settings or get_settings()
    app = FastAPI(title="Voice Workout API", version="0.1.0")
    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: config

    register_error_handlers(app)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allow_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post(
        "/api/transcribe",
        response_model=TranscriptResponse,
        responses=ERROR_RESPONSES,
    )
    async def transcribe_endpoint(
        request: Request,
        settings: Settings = Depends(get_settings),
        client: OpenAI = Depends(get_openai_client),
    ) -> TranscriptResponse:
        """
        Transcribe one recorded answer.

        Expects multipart fields `audio` (the clip) and `step` (0-2). Only an
        absent field is rejected; an empty or unknown step transcribes with an
        empty question hint.
        """
        form = await request.form()
        audio = form.get("audio")
        step = form.get("step")
        if not isinstance(audio, UploadFile):
            logger.warning("Transcription request without audio")
            raise MissingInputError("No audio file provided")
        if step is None:
            logger.warning("Transcription request without step")
            raise MissingInputError("No step provided")

        logger.info(f"Transcribing answer for step {step!r}")
        transcript = await transcribe_audio(
            client,
            audio,
            step=parse_step(step if isinstance(step, str) else ""),
            model=settings.transcription_model,
        )
        return TranscriptResponse(transcript=transcript)

    @app.post("/api/workout", response_class=StreamingResponse, responses=ERROR_RESPONSES)
    async def workout_endpoint(
        answers: WorkoutRequest,
        settings: Settings = Depends(get_settings),
        client: OpenAI = Depends(get_openai_client),
    ) -> StreamingResponse:
        logger.info(
            f"Generating workout for time={answers.time!r} "
            f"energy={answers.energy_level!r} outcome={answers.desired_outcome!r}"
        )
        chunks = open_workout_stream(client, answers, model=settings.workout_model)
        return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")

    return app
