"""
Mental state classification

This module maps normalized band powers to a dominant band and the mental state
and emotion associated with it, holding the previous result when a window
carries no usable signal.
"""

import logging
from typing import Dict, Optional, Tuple

from ..core.data_types import Band, BandPowers, Classification, Emotion, MentalState
from ..core.errors import DegenerateSignal
from ..processing.features import normalize_band_powers

BAND_STATES: Dict[Band, Tuple[MentalState, Emotion]] = {
    Band.DELTA: (MentalState.DROWSY, Emotion.SLEEPY),
    Band.THETA: (MentalState.MEDITATIVE, Emotion.CALM),
    Band.ALPHA: (MentalState.RELAXED, Emotion.PEACEFUL),
    Band.BETA: (MentalState.FOCUSED, Emotion.ALERT),
    Band.GAMMA: (MentalState.EXCITED, Emotion.ENERGIZED),
}


def dominant_band(powers: BandPowers) -> Band:
    """Band with the strictly greatest power; earlier bands win ties"""
    best_band, best_power = Band.DELTA, powers.delta
    for band, power in powers.items():
        if power > best_power:
            best_band, best_power = band, power
    return best_band


def classify(powers: BandPowers) -> Classification:
    """
    Classify normalized band powers

    Args:
        powers: Band powers as percentages of their sum

    Returns:
        Classification: Dominant band, state, emotion and confidence (0-100)
    """
    band = dominant_band(powers)
    state, emotion = BAND_STATES[band]
    confidence = min(max(float(powers.get(band)), 0.0), 100.0)
    return Classification(dominant_band=band, state=state, emotion=emotion, confidence=confidence)


class StateDetector:
    """
    Stateful classifier for the streaming loop

    Normalizes raw band powers and classifies them. A window with zero total
    power keeps the previous classification so the reported state does not
    flicker.
    """

    def __init__(self):
        self.last_classification: Optional[Classification] = None
        self.last_normalized: Optional[BandPowers] = None
        self.last_update_time = 0.0
        self.degenerate_count = 0
        self.last_was_degenerate = False

    def update(self, powers: BandPowers, timestamp: float = 0.0) -> Optional[Classification]:
        """
        Classify raw band powers from the current window

        Args:
            powers: Raw (un-normalized) band powers
            timestamp: Window timestamp

        Returns:
            Classification: New classification, or the previous one (None before
            the first valid window) if the signal is degenerate
        """
        try:
            normalized = normalize_band_powers(powers)
        except DegenerateSignal as e:
            self.degenerate_count += 1
            self.last_was_degenerate = True
            logging.warning(f"Degenerate window, keeping previous state: {e}")
            return self.last_classification

        self.last_was_degenerate = False
        classification = classify(normalized)
        if self.last_classification is None or classification.state != self.last_classification.state:
            logging.info(f"State -> {classification.state.value} "
                         f"({classification.dominant_band.value}, {classification.confidence:.1f}%)")

        self.last_classification = classification
        self.last_normalized = normalized
        self.last_update_time = timestamp
        return classification
