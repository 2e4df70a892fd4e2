"""
EEG feature extraction

This module converts sample windows into band powers: the power spectral density
is computed once per window from the fast transform and then averaged over the
bins of each frequency band.
"""

import logging
import math
from typing import Dict, Tuple
import numpy as np

from ..core.data_types import Band, BandPowers, EEGWindow
from ..core.config import FREQ_BANDS, SAMPLING_RATE_HZ, WINDOW_SIZE
from ..core.errors import DegenerateBand, DegenerateSignal, InvalidInputLength
from .spectral import ArrayLike, is_power_of_two, power_spectrum


def band_bin_ranges(n_samples: int, fs: float,
                    freq_bands: Dict[str, Tuple[float, float]] = FREQ_BANDS) -> Dict[Band, Tuple[int, int]]:
    """
    Map each band to its half-open PSD bin range

    Args:
        n_samples: Window length
        fs: Sampling frequency (Hz)
        freq_bands: Band name to (low_hz, high_hz)

    Returns:
        Dict[Band, (low_idx, high_idx)]

    Raises:
        DegenerateBand: If a band covers no bins or runs past the Nyquist bin
    """
    resolution = fs / n_samples
    ranges = {}
    for band in Band:
        low, high = freq_bands[band.value]
        low_idx = int(math.floor(low / resolution))
        high_idx = int(math.floor(high / resolution))
        if high_idx <= low_idx or high_idx > n_samples // 2 + 1:
            raise DegenerateBand(band.value, low_idx, high_idx, resolution)
        ranges[band] = (low_idx, high_idx)
    return ranges


def band_powers_from_psd(psd: np.ndarray, ranges: Dict[Band, Tuple[int, int]]) -> BandPowers:
    """Average a precomputed PSD over each band's bin range"""
    powers = BandPowers()
    for band, (low_idx, high_idx) in ranges.items():
        setattr(powers, band.value, float(np.mean(psd[low_idx:high_idx])))
    return powers


def extract_band_powers(window: ArrayLike, fs: float,
                        freq_bands: Dict[str, Tuple[float, float]] = FREQ_BANDS) -> BandPowers:
    """
    Extract the five band powers from a single-channel window

    Args:
        window: Real samples, length must be a power of two
        fs: Sampling frequency (Hz)

    Returns:
        BandPowers: Mean PSD per band
    """
    psd = power_spectrum(window)
    return band_powers_from_psd(psd, band_bin_ranges(len(psd), fs, freq_bands))


def normalize_band_powers(powers: BandPowers) -> BandPowers:
    """
    Rescale band powers to percentages of their sum

    Raises:
        DegenerateSignal: If the total power is zero (or not finite)
    """
    total = powers.total()
    if total <= 0.0 or not math.isfinite(total):
        raise DegenerateSignal(f"Cannot normalize band powers with total {total}")

    return BandPowers(**{band.value: power / total * 100.0 for band, power in powers.items()})


class FeatureExtractor:
    """
    Extract band powers from multichannel EEG windows

    The band layout is validated against the configured window size when the
    extractor is built, so an unusable configuration fails before streaming.
    """

    def __init__(self, fs: float = SAMPLING_RATE_HZ, window_size: int = WINDOW_SIZE,
                 freq_bands: Dict[str, Tuple[float, float]] = FREQ_BANDS):
        self.fs = fs
        self.window_size = window_size
        self.freq_bands = freq_bands
        if not is_power_of_two(window_size):
            raise InvalidInputLength(window_size)
        self.ranges = band_bin_ranges(window_size, fs, freq_bands)
        layout = {band.value: r for band, r in self.ranges.items()}
        logging.debug(f"Band bin ranges at {fs / window_size:.3f} Hz/bin: {layout}")

    def _ranges_for(self, n_samples: int, fs: float) -> Dict[Band, Tuple[int, int]]:
        if n_samples == self.window_size and fs == self.fs:
            return self.ranges
        return band_bin_ranges(n_samples, fs, self.freq_bands)

    def extract_features(self, window: EEGWindow) -> BandPowers:
        """
        Extract band powers averaged over all channels of a window

        Args:
            window: EEG analysis window

        Returns:
            BandPowers: Channel-averaged band powers
        """
        ranges = self._ranges_for(window.n_samples, window.fs)
        per_channel = [band_powers_from_psd(power_spectrum(samples), ranges)
                       for samples in window.channels()]

        powers = BandPowers()
        for band in Band:
            setattr(powers, band.value,
                    float(np.mean([p.get(band) for p in per_channel])))
        return powers
