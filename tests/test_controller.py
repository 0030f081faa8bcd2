from typing import Iterator, List, Optional

import httpx
import pytest

from voice_workout.api_client import WorkoutAPIClient
from voice_workout.controller import (
    GENERATING_STATUS,
    IDLE_PROMPT,
    MICROPHONE_ERROR,
    PROCESSING_STATUS,
    InterviewController,
    ViewState,
)
from voice_workout.exceptions import APIError, MicrophoneUnavailableError
from voice_workout.session import InterviewAnswers, InterviewStep, Phase


class FakeView:
    def __init__(self) -> None:
        self.states: List[ViewState] = []

    def render(self, state: ViewState) -> None:
        self.states.append(state)

    @property
    def last(self) -> ViewState:
        return self.states[-1]


class FakeRecorder:
    def __init__(self, clip: Optional[bytes] = b"clip") -> None:
        self.clip = clip
        self.denied = False
        self.starts = 0

    def start(self) -> None:
        if self.denied:
            raise MicrophoneUnavailableError("permission denied")
        self.starts += 1

    def stop(self) -> Optional[bytes]:
        return self.clip


class FakeAPI:
    def __init__(self) -> None:
        self.transcripts: List[str] = ["20 minutes", "high", "strength"]
        self.chunks: List[str] = ["Warm-up: ", "jog 2 min", "\nMain: ", "squats x10"]
        self.transcribe_calls: List[tuple] = []
        self.workout_calls: List[InterviewAnswers] = []
        self.transcribe_error: Optional[APIError] = None
        self.stream_error: Optional[APIError] = None

    def transcribe(self, clip: bytes, step: int) -> str:
        self.transcribe_calls.append((clip, step))
        if self.transcribe_error is not None:
            raise self.transcribe_error
        return self.transcripts[step]

    def stream_workout(self, answers: InterviewAnswers) -> Iterator[str]:
        self.workout_calls.append(answers)
        for chunk in self.chunks:
            yield chunk
        if self.stream_error is not None:
            raise self.stream_error


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def recorder() -> FakeRecorder:
    return FakeRecorder()


@pytest.fixture
def api() -> FakeAPI:
    return FakeAPI()


@pytest.fixture
def controller(view, recorder, api) -> InterviewController:
    return InterviewController(view=view, recorder=recorder, api=api)


def answer(controller: InterviewController) -> None:
    controller.toggle_recording()
    controller.toggle_recording()


def test_microphone_denied_shows_error_and_keeps_step(controller, view, recorder, api):
    recorder.denied = True

    controller.toggle_recording()

    assert view.last.error == MICROPHONE_ERROR
    assert view.last.step == 0
    assert view.last.phase is Phase.IDLE
    assert api.transcribe_calls == []


def test_recording_shows_current_question(controller, view):
    controller.refresh()
    assert view.last.prompt == IDLE_PROMPT

    controller.toggle_recording()

    assert view.last.recording
    assert view.last.prompt == "How much time do you have?"


def test_first_answer_sets_time_only(controller, api):
    api.transcripts[0] = "30 minutes"

    answer(controller)

    assert api.transcribe_calls == [(b"clip", 0)]
    assert controller.session.answers == InterviewAnswers(time="30 minutes")
    assert controller.session.step is InterviewStep.ENERGY_LEVEL
    assert controller.session.phase is Phase.IDLE


def test_processing_state_disables_button(controller, view):
    answer(controller)

    assert [state.phase for state in view.states] == [
        Phase.RECORDING,
        Phase.PROCESSING,
        Phase.IDLE,
    ]
    assert view.states[1].busy
    assert not view.states[2].busy


def test_three_answers_generate_workout_once(controller, view, api):
    for _ in range(3):
        answer(controller)

    assert [step for _, step in api.transcribe_calls] == [0, 1, 2]
    assert api.workout_calls == [
        InterviewAnswers(time="20 minutes", energy_level="high", desired_outcome="strength")
    ]
    assert view.last.phase is Phase.DONE
    assert view.last.progress == 100.0
    assert view.last.workout_text == "".join(api.chunks)


def test_workout_text_grows_with_each_chunk(controller, view, api):
    for _ in range(3):
        answer(controller)

    generating = [s.workout_text for s in view.states if s.phase is Phase.GENERATING]
    expected = [""]
    for chunk in api.chunks:
        expected.append(expected[-1] + chunk)
    assert generating == expected


def test_transcription_failure_halts_flow(controller, view, api):
    answer(controller)
    api.transcribe_error = APIError("quota exceeded", 500)

    answer(controller)

    assert view.last.error == "Failed to process audio: quota exceeded"
    assert view.last.phase is Phase.FAILED
    assert controller.session.step is InterviewStep.ENERGY_LEVEL
    assert controller.session.answers.time == "20 minutes"
    assert api.workout_calls == []


def test_next_press_after_failure_starts_new_interview(controller, api):
    answer(controller)
    api.transcribe_error = APIError("quota exceeded", 500)
    answer(controller)
    api.transcribe_error = None

    controller.toggle_recording()

    assert controller.session.phase is Phase.RECORDING
    assert controller.session.step is InterviewStep.TIME
    assert controller.session.answers == InterviewAnswers()
    assert controller.session.error == ""


def test_generation_failure_is_reported(controller, view, api):
    api.stream_error = APIError("connection reset")

    for _ in range(3):
        answer(controller)

    assert view.last.error == "Failed to generate workout: connection reset"
    assert view.last.phase is Phase.FAILED
    assert view.last.workout_text == "".join(api.chunks)


def test_empty_clip_is_not_sent(controller, view, recorder, api):
    recorder.clip = None

    answer(controller)

    assert api.transcribe_calls == []
    assert view.last.error
    assert view.last.phase is Phase.IDLE
    assert view.last.step == 0


def test_button_ignored_while_busy(view, recorder, api):
    pending = []
    controller = InterviewController(
        view=view, recorder=recorder, api=api, run_in_background=pending.append
    )

    answer(controller)
    controller.toggle_recording()

    assert recorder.starts == 1
    assert controller.session.phase is Phase.PROCESSING

    pending.pop()()
    assert controller.session.phase is Phase.IDLE
    assert controller.session.step is InterviewStep.ENERGY_LEVEL


def test_generation_receives_a_copy_of_the_answers(controller, api):
    for _ in range(3):
        answer(controller)

    controller.session.answers.time = "changed"

    assert api.workout_calls[0].time == "20 minutes"


def test_collected_answers_are_summarized(controller, view):
    answer(controller)
    assert view.last.answers == (("Time", "20 minutes"),)
    assert view.last.heard_text == "I heard: 20 minutes"

    answer(controller)
    assert view.last.answers_text == "Time: 20 minutes\nEnergy Level: high"


def test_summary_lists_all_three_answers_with_the_plan(controller, view):
    for _ in range(3):
        answer(controller)

    assert view.last.answers_text == "Time: 20 minutes\nEnergy Level: high\nGoal: strength"


def test_status_line_follows_requests(controller, view):
    for _ in range(3):
        answer(controller)

    statuses = {state.phase: state.status for state in view.states}
    assert statuses[Phase.PROCESSING] == PROCESSING_STATUS
    assert statuses[Phase.GENERATING] == GENERATING_STATUS
    assert statuses[Phase.RECORDING] == ""
    assert statuses[Phase.DONE] == ""

    generating = [s for s in view.states if s.phase is Phase.GENERATING]
    assert all(state.prompt == "" for state in generating)


def test_new_workout_clears_plan_and_answers(controller, view):
    for _ in range(3):
        answer(controller)

    controller.new_workout()

    assert view.last.phase is Phase.IDLE
    assert view.last.workout_text == ""
    assert view.last.answers == ()
    assert view.last.transcript == ""
    assert view.last.prompt == IDLE_PROMPT


def test_interrupted_server_stream_fails_the_interview(view, recorder):
    transcripts = iter(["20 minutes", "high", "strength"])

    def body() -> Iterator[bytes]:
        yield b"Warm-up: "
        raise httpx.RemoteProtocolError("peer closed connection")

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/transcribe":
            return httpx.Response(200, json={"transcript": next(transcripts)})
        return httpx.Response(200, content=body())

    api = WorkoutAPIClient(base_url="http://test", transport=httpx.MockTransport(handler))
    controller = InterviewController(view=view, recorder=recorder, api=api)

    for _ in range(3):
        answer(controller)

    assert view.last.phase is Phase.FAILED
    assert view.last.error == "Failed to generate workout: The workout stream was interrupted"
    assert view.last.workout_text == "Warm-up: "
