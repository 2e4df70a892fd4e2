"""
Brain Music - Real-time EEG to music mapping

A modular Python package that analyses EEG sample windows, classifies the dominant
frequency band into a mental state, and turns that state into note patterns played
by short-lived synthesizer voices.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import (
    Band, MentalState, Emotion, Waveform, EEGWindow, BandPowers, Classification, NoteEvent,
)
from .core.errors import BrainMusicError, InvalidInputLength, DegenerateBand, DegenerateSignal
from .acquisition.sources import SyntheticEEGSource, ReplaySource
from .processing.preprocessor import Preprocessor
from .processing.features import FeatureExtractor, extract_band_powers, normalize_band_powers
from .processing.spectral import transform, inverse_transform
from .detection.state_classifier import StateDetector, classify
from .music.patterns import MusicGenerator, generate
from .music.voices import AudioSink, ManualClock, RealtimeClock, VoiceManager
from .communication.note_sender import NoteEventSender
from .pipeline import BrainMusicPipeline, TickResult

__all__ = [
    'Band', 'MentalState', 'Emotion', 'Waveform', 'EEGWindow', 'BandPowers',
    'Classification', 'NoteEvent',
    'BrainMusicError', 'InvalidInputLength', 'DegenerateBand', 'DegenerateSignal',
    'SyntheticEEGSource', 'ReplaySource',
    'Preprocessor', 'FeatureExtractor', 'extract_band_powers', 'normalize_band_powers',
    'transform', 'inverse_transform',
    'StateDetector', 'classify',
    'MusicGenerator', 'generate',
    'AudioSink', 'ManualClock', 'RealtimeClock', 'VoiceManager',
    'NoteEventSender',
    'BrainMusicPipeline', 'TickResult',
]
