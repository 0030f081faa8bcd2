import os

from dotenv import load_dotenv

load_dotenv(override=False)

WORKOUT_API_URL: str = os.getenv("WORKOUT_API_URL", "http://localhost:8000")
REQUEST_TIMEOUT: float = float(os.getenv("WORKOUT_API_TIMEOUT", "120"))

SAMPLE_RATE: int = 16000
CHANNELS: int = 1
CLIP_FILE_NAME: str = "recording.wav"

THEME: str = "DarkAmber"
APPLICATION_WIDTH: int = 70
