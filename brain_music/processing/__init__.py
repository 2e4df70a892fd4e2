"""
EEG signal processing components

This module contains the spectral transform, window preprocessing and band power
extraction used for real-time EEG analysis.
"""

from .spectral import transform, inverse_transform, direct_transform, power_spectrum
from .preprocessor import Preprocessor
from .features import (
    FeatureExtractor, band_bin_ranges, extract_band_powers, normalize_band_powers,
)

__all__ = [
    'transform', 'inverse_transform', 'direct_transform', 'power_spectrum',
    'Preprocessor', 'FeatureExtractor',
    'band_bin_ranges', 'extract_band_powers', 'normalize_band_powers',
]
