"""
HTTP client for the voice workout API.

Uses ``httpx.Client`` (sync) because the GUI runs each call on a worker
thread started by the window event loop.
"""

from typing import Any, Dict, Iterator, Optional

import httpx
from loguru import logger

from voice_workout.config import CLIP_FILE_NAME, REQUEST_TIMEOUT, WORKOUT_API_URL
from voice_workout.exceptions import APIError
from voice_workout.session import InterviewAnswers


def _error_message(response: httpx.Response) -> str:
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        payload: Any = response.json()
    except ValueError:
        return fallback
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return fallback


class WorkoutAPIClient:
    """Wrapper around the two endpoints the interview uses."""

    def __init__(
        self,
        base_url: str = WORKOUT_API_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    def close(self) -> None:
        self._client.close()

    def transcribe(self, clip: bytes, step: int) -> str:
        """
        Send one recorded answer and return its transcript.

        Raises:
            APIError: On transport failure, a non-2xx status, or an empty transcript.
        """
        logger.debug(f"Uploading {len(clip)} bytes for step {step}")
        try:
            response = self._client.post(
                "/api/transcribe",
                files={"audio": (CLIP_FILE_NAME, clip, "audio/wav")},
                data={"step": str(step)},
            )
        except httpx.HTTPError as exc:
            raise APIError(str(exc) or "Unable to reach the server") from exc

        if response.is_error:
            raise APIError(_error_message(response), response.status_code)

        data: Dict[str, Any] = response.json()
        transcript = data.get("transcript")
        if not transcript:
            raise APIError("No transcript received from server", response.status_code)
        return transcript

    def stream_workout(self, answers: InterviewAnswers) -> Iterator[str]:
        """
        Request a workout plan and yield its text as it arrives.

        Chunks are yielded in arrival order and are never merged or dropped.
        """
        payload = answers.to_payload()
        logger.debug(f"Requesting workout plan for {payload}")
        try:
            with self._client.stream("POST", "/api/workout", json=payload) as response:
                if response.is_error:
                    response.read()
                    raise APIError(_error_message(response), response.status_code)
                for chunk in response.iter_text():
                    if chunk:
                        yield chunk
        except httpx.RemoteProtocolError as exc:
            raise APIError("The workout stream was interrupted") from exc
        except httpx.HTTPError as exc:
            raise APIError(str(exc) or "Unable to reach the server") from exc
