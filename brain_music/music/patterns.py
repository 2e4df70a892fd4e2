"""
Music generation from mental state

Each mental state selects one of five fixed pattern generators. A generator turns
an intensity in [0, 1] into a fully materialized list of note events; nothing is
played here, the voice manager and audio sink take it from there.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple
import numpy as np

from ..core.data_types import Classification, MentalState, NoteEvent, Waveform
from ..core.config import ARPEGGIO_STAGGER_SEC, INTENSITY_SCALE


class Voicing(str, Enum):
    RANDOM_NOTE = "random_note"    # one pitch drawn uniformly from the set
    ARPEGGIO = "arpeggio"          # every pitch, staggered starts
    CHORD = "chord"                # every pitch, simultaneous


@dataclass(frozen=True)
class PatternSpec:
    """Fixed description of one pattern generator"""
    name: str
    pitches: Tuple[float, ...]
    waveform: Waveform
    base_gain: float
    duration: float
    voicing: Voicing
    stagger: float = 0.0


TECHNO = PatternSpec(
    name="technoPattern",
    pitches=(261.63, 293.66, 329.63, 392.00, 440.00),
    waveform=Waveform.SQUARE,
    base_gain=0.10,
    duration=0.10,
    voicing=Voicing.RANDOM_NOTE,
)

AMBIENT = PatternSpec(
    name="ambientPattern",
    pitches=(130.81, 164.81, 196.00, 246.94),
    waveform=Waveform.SINE,
    base_gain=0.05,
    duration=2.00,
    voicing=Voicing.ARPEGGIO,
    stagger=ARPEGGIO_STAGGER_SEC,
)

DEEP_BASS = PatternSpec(
    name="deepBassPattern",
    pitches=(65.41,),
    waveform=Waveform.SINE,
    base_gain=0.15,
    duration=0.50,
    voicing=Voicing.CHORD,
)

ETHEREAL = PatternSpec(
    name="etherealPattern",
    pitches=(261.63, 293.66, 329.63, 392.00),
    waveform=Waveform.TRIANGLE,
    base_gain=0.08,
    duration=1.00,
    voicing=Voicing.CHORD,
)

EXPERIMENTAL = PatternSpec(
    name="experimentalPattern",
    pitches=(523.25, 587.33, 659.25, 739.99),
    waveform=Waveform.SAWTOOTH,
    base_gain=0.12,
    duration=0.05,
    voicing=Voicing.RANDOM_NOTE,
)

STATE_PATTERNS: Dict[MentalState, PatternSpec] = {
    MentalState.FOCUSED: TECHNO,
    MentalState.RELAXED: AMBIENT,
    MentalState.DROWSY: DEEP_BASS,
    MentalState.MEDITATIVE: ETHEREAL,
    MentalState.EXCITED: EXPERIMENTAL,
}

# Used for any label outside the MentalState enumeration
FALLBACK_PATTERN = AMBIENT


def pattern_for(state) -> PatternSpec:
    """
    Resolve a state (enum member or string label) to its pattern

    Unknown labels resolve to the ambient pattern rather than raising.
    """
    parsed = MentalState.parse(state)
    if parsed is None:
        logging.debug(f"Unknown state label {state!r}, using {FALLBACK_PATTERN.name}")
        return FALLBACK_PATTERN
    return STATE_PATTERNS[parsed]


def render_pattern(pattern: PatternSpec, intensity: float, rng: np.random.Generator) -> List[NoteEvent]:
    """
    Turn a pattern into note events

    Args:
        pattern: Pattern descriptor
        intensity: Gain scale, clamped to [0, 1]
        rng: Random source for single-note patterns

    Returns:
        List[NoteEvent]: Events ordered by start offset
    """
    intensity = float(np.clip(intensity, 0.0, 1.0))
    gain = pattern.base_gain * intensity

    if pattern.voicing is Voicing.RANDOM_NOTE:
        pitches = [pattern.pitches[int(rng.integers(len(pattern.pitches)))]]
    else:
        pitches = list(pattern.pitches)

    events = []
    for i, frequency in enumerate(pitches):
        offset = i * pattern.stagger if pattern.voicing is Voicing.ARPEGGIO else 0.0
        events.append(NoteEvent(
            frequency=frequency,
            waveform=pattern.waveform,
            gain=gain,
            duration=pattern.duration,
            offset=offset,
        ))
    return events


def intensity_from_classification(classification: Classification,
                                  scale: float = INTENSITY_SCALE) -> float:
    """Dominant band percentage / 100, times scale, clamped to [0, 1]"""
    return float(np.clip(classification.confidence / 100.0 * scale, 0.0, 1.0))


class MusicGenerator:
    """
    Map mental states to note patterns

    The random source is the only state kept between calls; pass a seeded
    numpy Generator for reproducible note choices.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def generate(self, state, intensity: float) -> List[NoteEvent]:
        """
        Generate the note events for one generation cycle

        Args:
            state: MentalState or its string label
            intensity: Value in [0, 1]

        Returns:
            List[NoteEvent]: Events for the cycle
        """
        return render_pattern(pattern_for(state), intensity, self.rng)


def generate(state, intensity: float, rng: Optional[np.random.Generator] = None) -> List[NoteEvent]:
    """Module-level shortcut for MusicGenerator(rng).generate(state, intensity)"""
    return MusicGenerator(rng).generate(state, intensity)
