"""
Interview flow: record three spoken answers, transcribe each one, then
stream a workout plan built from them.

The controller owns an ``InterviewSession`` and reports every change to a
view as an immutable ``ViewState``. Long calls (transcription and
generation) go through ``run_in_background`` so a GUI can keep its event
loop responsive; by default they run inline.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Protocol, Tuple

from loguru import logger

from voice_workout.exceptions import APIError, MicrophoneUnavailableError
from voice_workout.session import (
    InterviewAnswers,
    InterviewSession,
    InterviewStep,
    Phase,
)

IDLE_PROMPT = "Tap the button and answer the prompts"
MICROPHONE_ERROR = "Failed to access microphone. Please check your permissions."
EMPTY_CLIP_ERROR = "No audio was captured. Please record your answer again."
PROCESSING_STATUS = "Processing your audio..."
GENERATING_STATUS = "Generating your personalized workout..."


@dataclass(frozen=True)
class ViewState:
    phase: Phase
    step: int
    prompt: str
    transcript: str
    error: str
    workout_text: str
    progress: float
    answers: Tuple[Tuple[str, str], ...] = ()
    status: str = ""

    @property
    def recording(self) -> bool:
        return self.phase is Phase.RECORDING

    @property
    def busy(self) -> bool:
        return self.phase in (Phase.PROCESSING, Phase.GENERATING)

    @property
    def heard_text(self) -> str:
        return f"I heard: {self.transcript}" if self.transcript else ""

    @property
    def answers_text(self) -> str:
        return "\n".join(f"{label}: {value}" for label, value in self.answers)


class InterviewView(Protocol):
    def render(self, state: ViewState) -> None: ...


class Recorder(Protocol):
    def start(self) -> None: ...

    def stop(self) -> Optional[bytes]: ...


class WorkoutAPI(Protocol):
    def transcribe(self, clip: bytes, step: int) -> str: ...

    def stream_workout(self, answers: InterviewAnswers) -> Iterator[str]: ...


def run_inline(task: Callable[[], None]) -> None:
    task()


class InterviewController:
    def __init__(
        self,
        view: InterviewView,
        recorder: Recorder,
        api: WorkoutAPI,
        session: Optional[InterviewSession] = None,
        run_in_background: Callable[[Callable[[], None]], None] = run_inline,
    ) -> None:
        self.view = view
        self.recorder = recorder
        self.api = api
        self.session = session or InterviewSession()
        self.run_in_background = run_in_background

    def snapshot(self) -> ViewState:
        session = self.session
        if session.phase in (Phase.RECORDING, Phase.PROCESSING) or (
            session.phase is Phase.IDLE and session.step > 0
        ):
            prompt = session.question
        elif session.phase in (Phase.GENERATING, Phase.DONE):
            prompt = ""
        else:
            prompt = IDLE_PROMPT

        status = ""
        if session.phase is Phase.PROCESSING:
            status = PROCESSING_STATUS
        elif session.phase is Phase.GENERATING:
            status = GENERATING_STATUS
        return ViewState(
            phase=session.phase,
            step=int(session.step),
            prompt=prompt,
            transcript=session.transcript,
            error=session.error,
            workout_text=session.workout_text,
            progress=session.progress,
            answers=session.answers.summary(),
            status=status,
        )

    def refresh(self) -> None:
        self.view.render(self.snapshot())

    def toggle_recording(self) -> None:
        """Voice button: stop an active recording, otherwise record the next answer."""
        if self.session.busy:
            logger.debug("Ignoring voice button while a request is in flight.")
            return
        if self.session.phase is Phase.RECORDING:
            self.stop_recording()
            return
        if self.session.needs_reset():
            logger.debug("Starting a new interview.")
            self.session.reset()
        self.start_recording()

    def new_workout(self) -> None:
        """Discard the finished plan and the answers, ready for a new interview."""
        if self.session.busy or self.session.phase is Phase.RECORDING:
            return
        self.session.reset()
        self.refresh()

    def start_recording(self) -> None:
        try:
            self.recorder.start()
        except MicrophoneUnavailableError as error:
            logger.error(f"Error accessing microphone: {error}")
            self.session.error = MICROPHONE_ERROR
            self.session.phase = Phase.IDLE
            self.refresh()
            return

        self.session.error = ""
        self.session.phase = Phase.RECORDING
        logger.debug(f"Recording answer for step {int(self.session.step)}")
        self.refresh()

    def stop_recording(self) -> None:
        if self.session.phase is not Phase.RECORDING:
            return
        clip = self.recorder.stop()
        if not clip:
            self.session.error = EMPTY_CLIP_ERROR
            self.session.phase = Phase.IDLE
            self.refresh()
            return

        step = self.session.step
        self.session.phase = Phase.PROCESSING
        self.refresh()
        self.run_in_background(lambda: self.send_audio_to_server(clip, step))

    def send_audio_to_server(self, clip: bytes, step: InterviewStep) -> None:
        try:
            transcript = self.api.transcribe(clip, int(step))
        except APIError as error:
            logger.error(f"Error sending audio to server: {error.message}")
            self.session.fail(f"Failed to process audio: {error.message}")
            self.refresh()
            return

        next_step = self.session.record_answer(transcript)
        if next_step is None:
            self.generate_workout(self.session.answers.model_copy())
            return

        self.session.phase = Phase.IDLE
        self.refresh()

    def generate_workout(self, answers: InterviewAnswers) -> None:
        session = self.session
        session.phase = Phase.GENERATING
        session.workout_text = ""
        self.refresh()
        try:
            for chunk in self.api.stream_workout(answers):
                session.append_workout_chunk(chunk)
                self.refresh()
        except APIError as error:
            logger.error(f"Error generating workout: {error.message}")
            session.fail(f"Failed to generate workout: {error.message}")
            self.refresh()
            return

        session.phase = Phase.DONE
        session.progress = 100.0
        logger.debug(f"Workout received ({len(session.workout_text)} characters).")
        self.refresh()
