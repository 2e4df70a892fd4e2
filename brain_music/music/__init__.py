"""
Music generation and voice management

This module maps mental states to note patterns and manages the lifecycle of
the voices that play them.
"""

from .patterns import (
    PatternSpec, Voicing, STATE_PATTERNS, FALLBACK_PATTERN,
    MusicGenerator, generate, pattern_for, intensity_from_classification,
)
from .voices import AudioSink, ManualClock, RealtimeClock, VoiceManager

__all__ = [
    'PatternSpec', 'Voicing', 'STATE_PATTERNS', 'FALLBACK_PATTERN',
    'MusicGenerator', 'generate', 'pattern_for', 'intensity_from_classification',
    'AudioSink', 'ManualClock', 'RealtimeClock', 'VoiceManager',
]
