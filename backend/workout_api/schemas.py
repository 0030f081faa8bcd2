from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TranscriptResponse(BaseModel):
    transcript: str = Field(..., description="Recognized text for one answer.")


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str


class WorkoutRequest(BaseModel):
    """The three spoken answers, keyed the way the desktop client sends them."""

    model_config = ConfigDict(populate_by_name=True)

    time: str = Field("", description="Time available for the workout.")
    energy_level: str = Field("", alias="energyLevel")
    desired_outcome: str = Field("", alias="desiredOutcome")

    @field_validator("time", "energy_level", "desired_outcome", mode="before")
    @classmethod
    def coerce_to_text(cls, value: Any) -> str:
        # Any JSON value is accepted and embedded in the prompt as text.
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)
