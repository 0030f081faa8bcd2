from io import BytesIO
from typing import Any, List, Optional

import numpy as np
import sounddevice as sd
import soundfile as sf
from loguru import logger

from voice_workout.config import CHANNELS, SAMPLE_RATE
from voice_workout.exceptions import MicrophoneUnavailableError


def encode_wav(frames: List[np.ndarray], samplerate: int = SAMPLE_RATE) -> bytes:
    """
    Join captured blocks into a single 16-bit PCM WAV clip.

    Args:
        frames (List[np.ndarray]): Audio blocks in capture order.
        samplerate (int, optional): The sample rate. Defaults to SAMPLE_RATE.

    Returns:
        bytes: The encoded clip.
    """
    buffer = BytesIO()
    audio_data: np.ndarray = np.vstack(frames)
    sf.write(
        file=buffer,
        data=audio_data,
        samplerate=samplerate,
        format="WAV",
        subtype="PCM_16",
    )
    return buffer.getvalue()


class MicrophoneRecorder:
    """
    Capture audio from the default input device between start() and stop().
    """

    def __init__(self, samplerate: int = SAMPLE_RATE, channels: int = CHANNELS) -> None:
        self.samplerate = samplerate
        self.channels = channels
        self._stream: Optional[sd.InputStream] = None
        self._frames: List[np.ndarray] = []

    @property
    def recording(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        """
        Open the input device and begin buffering audio.

        Raises:
            MicrophoneUnavailableError: If the device cannot be opened.
        """
        if self._stream is not None:
            logger.debug("Recorder already running.")
            return

        self._frames = []
        try:
            stream = sd.InputStream(
                samplerate=self.samplerate,
                channels=self.channels,
                callback=self._audio_callback,
            )
            stream.start()
        except (sd.PortAudioError, OSError) as error:
            logger.error(f"Unable to open microphone: {error}")
            raise MicrophoneUnavailableError(str(error)) from error

        self._stream = stream
        logger.debug("Recording...")

    def stop(self) -> Optional[bytes]:
        """
        Release the input device and return the captured clip.

        Returns:
            Optional[bytes]: WAV bytes, or None if nothing was captured.
        """
        stream, self._stream = self._stream, None
        if stream is not None:
            try:
                stream.stop()
            finally:
                stream.close()
            logger.debug("Recording stopped.")

        frames, self._frames = self._frames, []
        if not frames:
            logger.warning("No audio recorded.")
            return None
        return encode_wav(frames, self.samplerate)

    def _audio_callback(self, indata: np.ndarray, frames: int, _time: Any, status: Any) -> None:
        if status:
            logger.warning(f"Audio input status: {status}")
        self._frames.append(indata.copy())
