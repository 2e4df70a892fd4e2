"""
Per-tick processing pipeline

Wires preprocessing, band power extraction, state detection, music generation and
voice management together. One call to process() is one tick of the driver loop.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np

from .core.data_types import BandPowers, Classification, NoteEvent, VoiceHandle
from .core.config import INTENSITY_SCALE, SAMPLING_RATE_HZ, SMOOTHING_HALF_WIDTH, WINDOW_SIZE
from .processing.preprocessor import Preprocessor
from .processing.features import FeatureExtractor
from .detection.state_classifier import StateDetector
from .music.patterns import MusicGenerator, intensity_from_classification
from .music.voices import AudioSink, VoiceManager


@dataclass
class TickResult:
    """Everything one tick produced"""
    timestamp: float
    band_powers: BandPowers
    classification: Optional[Classification]
    degenerate: bool = False
    intensity: float = 0.0
    events: List[NoteEvent] = field(default_factory=list)
    handles: List[VoiceHandle] = field(default_factory=list)


class BrainMusicPipeline:
    """
    Turn sample windows into voices

    A degenerate window (zero total power) keeps the previous classification
    and starts no new generation cycle; the voices already scheduled play out.
    """

    def __init__(self, preprocessor: Preprocessor, feature_extractor: FeatureExtractor,
                 detector: StateDetector, generator: MusicGenerator, voice_manager: VoiceManager,
                 intensity_scale: float = INTENSITY_SCALE):
        self.preprocessor = preprocessor
        self.feature_extractor = feature_extractor
        self.detector = detector
        self.generator = generator
        self.voice_manager = voice_manager
        self.intensity_scale = intensity_scale

    @classmethod
    def build(cls, fs: float = SAMPLING_RATE_HZ, window_size: int = WINDOW_SIZE,
              clock=None, sink: Optional[AudioSink] = None,
              rng: Optional[np.random.Generator] = None,
              smoothing_half_width: int = SMOOTHING_HALF_WIDTH,
              intensity_scale: float = INTENSITY_SCALE) -> "BrainMusicPipeline":
        """Create a pipeline with default components"""
        return cls(
            preprocessor=Preprocessor(fs, smoothing_half_width),
            feature_extractor=FeatureExtractor(fs, window_size),
            detector=StateDetector(),
            generator=MusicGenerator(rng),
            voice_manager=VoiceManager(clock, sink),
            intensity_scale=intensity_scale,
        )

    def process(self, raw_data: np.ndarray, timestamp: float) -> TickResult:
        """
        Run one tick

        Args:
            raw_data: EEG data (channels x samples), samples a power of two
            timestamp: Tick timestamp

        Returns:
            TickResult: Powers, classification and the voices started
        """
        window = self.preprocessor.create_window(raw_data, timestamp)
        powers = self.feature_extractor.extract_features(window)
        classification = self.detector.update(powers, timestamp)

        result = TickResult(
            timestamp=timestamp,
            band_powers=powers,
            classification=classification,
            degenerate=self.detector.last_was_degenerate,
        )
        if result.degenerate or classification is None:
            return result

        result.intensity = intensity_from_classification(classification, self.intensity_scale)
        result.events = self.generator.generate(classification.state, result.intensity)
        result.handles = self.voice_manager.start_cycle(result.events)
        return result

    def shutdown(self):
        """Release all voices and close the audio sink"""
        self.voice_manager.shutdown()
        try:
            self.voice_manager.sink.close()
        except Exception as e:
            logging.error(f"Failed to close audio sink: {e}")
