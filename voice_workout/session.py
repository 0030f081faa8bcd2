"""
Interview state for one voice-driven workout request.

The three questions are asked in a fixed order. ``STEP_TABLE`` ties each
step to the question shown to the user and the answer field its transcript
fills, so the order lives in one place.
"""

from enum import Enum, IntEnum
from typing import Dict, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class InterviewStep(IntEnum):
    TIME = 0
    ENERGY_LEVEL = 1
    DESIRED_OUTCOME = 2


class Phase(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


class StepInfo(NamedTuple):
    question: str
    field: str
    label: str


STEP_TABLE: Dict[InterviewStep, StepInfo] = {
    InterviewStep.TIME: StepInfo("How much time do you have?", "time", "Time"),
    InterviewStep.ENERGY_LEVEL: StepInfo(
        "What's your energy level?", "energy_level", "Energy Level"
    ),
    InterviewStep.DESIRED_OUTCOME: StepInfo(
        "What's your desired outcome?", "desired_outcome", "Goal"
    ),
}

STEP_COUNT: int = len(STEP_TABLE)


class InterviewAnswers(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    time: str = ""
    energy_level: str = Field("", alias="energyLevel")
    desired_outcome: str = Field("", alias="desiredOutcome")

    def is_complete(self) -> bool:
        return all(
            getattr(self, info.field) for info in STEP_TABLE.values()
        )

    def to_payload(self) -> Dict[str, str]:
        """Serialize with the wire names the workout endpoint expects."""
        return self.model_dump(by_alias=True)

    def summary(self) -> Tuple[Tuple[str, str], ...]:
        """Labelled answers collected so far, in step order."""
        return tuple(
            (info.label, getattr(self, info.field))
            for info in STEP_TABLE.values()
            if getattr(self, info.field)
        )


class InterviewSession:
    """
    Owns the answers, the current step, and the display state of one interview.

    ``reset()`` is the only way to begin a new interview.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.step: InterviewStep = InterviewStep.TIME
        self.phase: Phase = Phase.IDLE
        self.answers: InterviewAnswers = InterviewAnswers()
        self.transcript: str = ""
        self.workout_text: str = ""
        self.error: str = ""
        self.progress: float = 0.0

    @property
    def question(self) -> str:
        return STEP_TABLE[self.step].question

    @property
    def is_last_step(self) -> bool:
        return self.step == STEP_COUNT - 1

    @property
    def busy(self) -> bool:
        return self.phase in (Phase.PROCESSING, Phase.GENERATING)

    def needs_reset(self) -> bool:
        """A new interview starts from step 0 or after the previous one ended."""
        if self.phase in (Phase.DONE, Phase.FAILED):
            return True
        return self.phase is Phase.IDLE and self.step == InterviewStep.TIME

    def record_answer(self, transcript: str) -> Optional[InterviewStep]:
        """
        Store a transcript in the field of the current step.

        Returns the next step, or None when the answered step was the last
        one and the answers are ready for workout generation.
        """
        text = transcript.strip()
        self.transcript = text
        setattr(self.answers, STEP_TABLE[self.step].field, text)
        completed = int(self.step) + 1
        self.progress = completed * (100 / STEP_COUNT)
        if completed >= STEP_COUNT:
            return None
        self.step = InterviewStep(completed)
        return self.step

    def append_workout_chunk(self, chunk: str) -> str:
        self.workout_text += chunk
        return self.workout_text

    def fail(self, message: str) -> None:
        self.error = message
        self.phase = Phase.FAILED
