"""
Error types for Brain Music

Analysis errors are raised to the immediate caller. Only the state detector
recovers from a degenerate signal, by holding its previous classification.
"""


class BrainMusicError(Exception):
    """Base class for all Brain Music errors"""


class InvalidInputLength(BrainMusicError, ValueError):
    """Sample window length is not a power of two (or is empty)"""

    def __init__(self, length: int):
        super().__init__(f"Window length must be a power of two >= 1, got {length}")
        self.length = length


class DegenerateBand(BrainMusicError, ValueError):
    """Band edges are narrower than the spectral resolution, or out of range"""

    def __init__(self, band: str, low_idx: int, high_idx: int, resolution: float):
        super().__init__(
            f"Band '{band}' resolves to empty bin range [{low_idx}, {high_idx}) "
            f"at {resolution:.3f} Hz resolution"
        )
        self.band = band
        self.low_idx = low_idx
        self.high_idx = high_idx
        self.resolution = resolution


class DegenerateSignal(BrainMusicError, ValueError):
    """Total band power is zero, so the powers cannot be normalized"""
