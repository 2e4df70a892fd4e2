"""
EEG signal sources

This module provides sample-window sources for the processing loop: a synthetic
generator for development and demos, and a replay source that streams windows
out of an array already held in memory.
"""

import logging
from typing import Optional
import numpy as np

from ..core.config import SAMPLING_RATE_HZ, N_CHANNELS, TICK_INTERVAL_MS

# Centre frequency (Hz) of the rhythm injected for each band, in band order
RHYTHM_FREQS = (2.0, 6.0, 10.0, 20.0, 40.0)


class SyntheticEEGSource:
    """
    Generate synthetic EEG data for testing the music pipeline

    Each channel is a mixture of one sine per band plus white noise. The
    emphasized band rotates every state_cycle_time seconds so that every mental
    state is visited.
    """

    def __init__(self, fs: float = SAMPLING_RATE_HZ, n_channels: int = N_CHANNELS,
                 rng: Optional[np.random.Generator] = None,
                 hop_sec: float = TICK_INTERVAL_MS / 1000.0):
        self.fs = fs
        self.n_channels = n_channels
        self.rng = rng if rng is not None else np.random.default_rng()
        self.hop_sec = hop_sec
        self.time = 0.0
        self.state_cycle_time = 10.0  # Rotate the dominant rhythm every 10 seconds
        self.focus_amp = 100.0        # Amplitude of the emphasized rhythm
        self.background_amp = 10.0    # Amplitude of the other rhythms
        self.noise_std = 5.0
        self.phases = self.rng.uniform(0, 2 * np.pi, size=(n_channels, len(RHYTHM_FREQS)))

    def emphasized_band_index(self) -> int:
        return int(self.time // self.state_cycle_time) % len(RHYTHM_FREQS)

    def get_data(self, n_samples: int) -> np.ndarray:
        """
        Generate the next synthetic window and advance time by one hop

        Args:
            n_samples: Samples per channel

        Returns:
            np.ndarray: Synthetic EEG data (channels x samples)
        """
        t = self.time + np.arange(n_samples) / self.fs
        focus = self.emphasized_band_index()

        data = self.rng.standard_normal((self.n_channels, n_samples)) * self.noise_std
        for ch in range(self.n_channels):
            for i, freq in enumerate(RHYTHM_FREQS):
                amp = self.focus_amp if i == focus else self.background_amp
                data[ch, :] += amp * np.sin(2 * np.pi * freq * t + self.phases[ch, i])

        self.time += self.hop_sec
        return data

    def disconnect(self):
        pass


class ReplaySource:
    """
    Stream windows out of a recorded (channels x samples) array

    Windows advance by hop_samples; with loop=True the recording wraps around,
    otherwise get_data returns None once it is exhausted.
    """

    def __init__(self, recording: np.ndarray, fs: float = SAMPLING_RATE_HZ,
                 hop_samples: Optional[int] = None, loop: bool = True):
        recording = np.asarray(recording, dtype=np.float64)
        if recording.ndim == 1:
            recording = recording[np.newaxis, :]
        if recording.ndim != 2 or recording.shape[1] == 0:
            raise ValueError(f"Recording must be (channels x samples), got shape {recording.shape}")

        self.recording = recording
        self.fs = fs
        self.n_channels = recording.shape[0]
        self.hop_samples = hop_samples if hop_samples is not None else max(1, int(fs * TICK_INTERVAL_MS / 1000))
        self.loop = loop
        self.position = 0

    @classmethod
    def from_file(cls, path: str, fs: float = SAMPLING_RATE_HZ, loop: bool = True) -> "ReplaySource":
        """Load a recording saved with numpy.save"""
        recording = np.load(path)
        logging.info(f"Loaded recording {path}: shape {recording.shape}")
        return cls(recording, fs=fs, loop=loop)

    def get_data(self, n_samples: int) -> Optional[np.ndarray]:
        """
        Return the next window of recorded data

        Args:
            n_samples: Samples per channel

        Returns:
            np.ndarray: EEG data (channels x samples) or None when exhausted
        """
        total = self.recording.shape[1]
        if not self.loop and self.position + n_samples > total:
            logging.info("Recording exhausted")
            return None

        indices = np.arange(self.position, self.position + n_samples)
        data = np.take(self.recording, indices, axis=1, mode="wrap")
        self.position += self.hop_samples
        if self.loop:
            self.position %= total
        return data

    def disconnect(self):
        pass
