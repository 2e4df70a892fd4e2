import numpy as np
import pytest

from brain_music.music.voices import AudioSink


class RecordingSink(AudioSink):
    """Audio sink that records every call"""

    def __init__(self):
        self.started = []
        self.stopped = []
        self.closed = False

    def start_voice(self, voice) -> None:
        self.started.append(voice.handle)

    def stop_voice(self, voice) -> None:
        self.stopped.append(voice.handle)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


def sine_window(freq: float, fs: float = 256.0, n_samples: int = 256, amplitude: float = 1.0) -> np.ndarray:
    t = np.arange(n_samples) / fs
    return amplitude * np.sin(2 * np.pi * freq * t)
