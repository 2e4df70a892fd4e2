"""
Core data types for Brain Music

This module defines the fundamental data structures used throughout the system
for representing EEG windows, band powers, mental states and note events.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple
import numpy as np


class Band(str, Enum):
    """Canonical EEG frequency bands, in tie-break order"""
    DELTA = "delta"
    THETA = "theta"
    ALPHA = "alpha"
    BETA = "beta"
    GAMMA = "gamma"


class MentalState(str, Enum):
    DROWSY = "drowsy"
    MEDITATIVE = "meditative"
    RELAXED = "relaxed"
    FOCUSED = "focused"
    EXCITED = "excited"

    @classmethod
    def parse(cls, label) -> Optional["MentalState"]:
        """Return the state for a label, or None if the label is unknown"""
        if isinstance(label, cls):
            return label
        try:
            return cls(str(label).strip().lower())
        except ValueError:
            return None


class Emotion(str, Enum):
    SLEEPY = "sleepy"
    CALM = "calm"
    PEACEFUL = "peaceful"
    ALERT = "alert"
    ENERGIZED = "energized"


class Waveform(str, Enum):
    SINE = "sine"
    SQUARE = "square"
    SAWTOOTH = "sawtooth"
    TRIANGLE = "triangle"


class VoiceState(str, Enum):
    CREATED = "created"
    PLAYING = "playing"
    STOPPED = "stopped"


@dataclass
class EEGWindow:
    """Container for a single EEG analysis window"""
    data: np.ndarray          # Shape: (n_channels, n_samples) or (n_samples,)
    timestamp: float          # Unix timestamp
    fs: float                 # Sampling frequency

    @property
    def n_samples(self) -> int:
        return int(self.data.shape[-1])

    @property
    def n_channels(self) -> int:
        return 1 if self.data.ndim == 1 else int(self.data.shape[0])

    def channels(self) -> Iterator[np.ndarray]:
        """Iterate over single-channel sample arrays"""
        if self.data.ndim == 1:
            yield self.data
        else:
            for ch in range(self.data.shape[0]):
                yield self.data[ch, :]


@dataclass
class BandPowers:
    """Container for frequency band powers"""
    delta: float = 0.0
    theta: float = 0.0
    alpha: float = 0.0
    beta: float = 0.0
    gamma: float = 0.0

    def get(self, band: Band) -> float:
        return getattr(self, Band(band).value)

    def items(self) -> Iterator[Tuple[Band, float]]:
        """Yield (band, power) pairs in canonical band order"""
        for band in Band:
            yield band, getattr(self, band.value)

    def total(self) -> float:
        return float(sum(power for _, power in self.items()))

    def as_dict(self) -> Dict[str, float]:
        return {band.value: float(power) for band, power in self.items()}


@dataclass(frozen=True)
class Classification:
    """Dominant band and the state/emotion it maps to"""
    dominant_band: Band
    state: MentalState
    emotion: Emotion
    confidence: float          # Dominant band share, 0-100


@dataclass(frozen=True)
class NoteEvent:
    """A single time-bounded tone for the audio sink"""
    frequency: float           # Hz
    waveform: Waveform
    gain: float
    duration: float            # seconds
    offset: float = 0.0        # start delay relative to the cycle start (s)


@dataclass(frozen=True)
class VoiceHandle:
    """Reference to a voice slot, valid only for the cycle that created it"""
    slot: int
    cycle: int


@dataclass
class Voice:
    """A transient sound unit owned by the voice manager"""
    handle: VoiceHandle
    frequency: float
    waveform: Waveform
    gain: float
    start_time: float
    stop_time: float
    state: VoiceState = VoiceState.CREATED
    timers: list = field(default_factory=list, repr=False)
