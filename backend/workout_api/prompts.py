import re
from typing import Optional

STEP_PATTERN = re.compile(r"[+-]?\d+")

QUESTIONS: tuple[str, ...] = (
    "How much time do you have?",
    "What's your energy level?",
    "What's your desired outcome?",
)

FITNESS_INSTRUCTOR_PROMPT = (
    "You are a knowledgeable fitness instructor who specializes in quick, "
    "effective workouts."
)

WORKOUT_TEMPLATE = """Create a quick workout routine with these parameters:
- Available time: {time}
- Current energy level: {energy_level}
- Desired outcome: {desired_outcome}

Format the response as a structured workout with:
1. Warm-up
2. Main exercises (with reps/duration)
3. Cool-down
Keep it concise and achievable within the time limit."""


def parse_step(raw: str) -> Optional[int]:
    """
    Read the leading integer of a form value such as "2" or " 1 ".

    Returns None when the value does not start with a number.
    """
    match = STEP_PATTERN.match(raw.strip())
    return int(match.group()) if match else None


def question_for_step(step: Optional[int]) -> str:
    """
    Return the fixed interview question for a step index.

    Unknown steps (None, negative, or past the last question) map to an
    empty string instead of raising.
    """
    if step is None or not 0 <= step < len(QUESTIONS):
        return ""
    return QUESTIONS[step]


def build_transcription_prompt(step: Optional[int]) -> str:
    question = question_for_step(step)
    return (
        "Transcribe the following audio. "
        f'The question being answered is: "{question}"'
    )


def build_workout_prompt(time: str, energy_level: str, desired_outcome: str) -> str:
    return WORKOUT_TEMPLATE.format(
        time=time,
        energy_level=energy_level,
        desired_outcome=desired_outcome,
    )
