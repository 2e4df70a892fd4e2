"""
Core data types and structures for Brain Music

This module contains the fundamental data classes and error types used throughout the system.
"""

from .data_types import (
    Band, MentalState, Emotion, Waveform, VoiceState,
    EEGWindow, BandPowers, Classification, NoteEvent, VoiceHandle, Voice,
)
from .errors import BrainMusicError, InvalidInputLength, DegenerateBand, DegenerateSignal

__all__ = [
    'Band', 'MentalState', 'Emotion', 'Waveform', 'VoiceState',
    'EEGWindow', 'BandPowers', 'Classification', 'NoteEvent', 'VoiceHandle', 'Voice',
    'BrainMusicError', 'InvalidInputLength', 'DegenerateBand', 'DegenerateSignal',
]
