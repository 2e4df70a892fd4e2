"""
EEG signal preprocessing

This module validates raw sample blocks and packages them into analysis windows,
optionally applying a centred moving-average smoothing pass.
"""

import logging
import numpy as np
from scipy import signal as sp_signal

from ..core.data_types import EEGWindow
from ..core.config import SAMPLING_RATE_HZ, SMOOTHING_HALF_WIDTH
from ..core.errors import InvalidInputLength
from .spectral import is_power_of_two


class Preprocessor:
    """
    EEG window preparation

    Checks the window length required by the transform and applies the
    smoothing pass channel by channel.
    """

    def __init__(self, fs: float = SAMPLING_RATE_HZ, smoothing_half_width: int = SMOOTHING_HALF_WIDTH):
        self.fs = fs
        self.smoothing_half_width = max(0, int(smoothing_half_width))

        self.kernel = np.ones(2 * self.smoothing_half_width + 1)
        if self.smoothing_half_width:
            logging.info(f"Smoothing enabled: {len(self.kernel)}-sample moving average")

    def smooth(self, samples: np.ndarray) -> np.ndarray:
        """
        Centred moving average; the window shrinks at the edges

        Args:
            samples: Single-channel samples

        Returns:
            np.ndarray: Smoothed copy
        """
        samples = np.asarray(samples, dtype=np.float64)
        if self.smoothing_half_width == 0 or len(samples) == 0:
            return samples.copy()

        sums = sp_signal.convolve(samples, self.kernel, mode="same")
        counts = sp_signal.convolve(np.ones_like(samples), self.kernel, mode="same")
        return sums / counts

    def filter_data(self, data: np.ndarray) -> np.ndarray:
        """
        Apply the smoothing pass to every channel

        Args:
            data: Raw EEG data (channels x samples) or (samples,)

        Returns:
            np.ndarray: Smoothed EEG data
        """
        data = np.asarray(data, dtype=np.float64)
        if data.ndim == 1:
            return self.smooth(data)

        filtered = data.copy()
        for ch in range(filtered.shape[0]):
            filtered[ch, :] = self.smooth(filtered[ch, :])
        return filtered

    def create_window(self, data: np.ndarray, timestamp: float) -> EEGWindow:
        """
        Create an EEG analysis window with preprocessing

        Args:
            data: Raw EEG data (channels x samples)
            timestamp: Window timestamp

        Returns:
            EEGWindow: Window ready for analysis

        Raises:
            InvalidInputLength: If the sample count is not a power of two
        """
        data = np.asarray(data, dtype=np.float64)
        if data.ndim not in (1, 2) or not is_power_of_two(data.shape[-1]):
            raise InvalidInputLength(int(data.shape[-1]) if data.ndim else 0)

        return EEGWindow(
            data=self.filter_data(data),
            timestamp=timestamp,
            fs=self.fs
        )
