"""
Configuration constants for Brain Music

This module contains all configuration parameters that users may need to customize
for their signal source, analysis resolution and audio output.
"""

from typing import Dict, Tuple

# ============================================================================
# SIGNAL CONFIGURATION - Edit these values to match your signal source
# ============================================================================

# Signal Configuration
SAMPLING_RATE_HZ = 256            # Sampling rate of incoming windows (Hz)
WINDOW_SIZE = 256                 # Samples per analysis window (must be a power of two)
N_CHANNELS = 4                    # Channels produced by the synthetic source

# Processing Configuration
TICK_INTERVAL_MS = 100            # Driver cadence between windows (ms)
SMOOTHING_HALF_WIDTH = 0          # Moving-average half width (samples), 0 disables
INTENSITY_SCALE = 1.0             # Multiplier on dominant band percentage / 100

# Audio Configuration
MASTER_GAIN = 0.3                 # Output gain applied by the audio sink
ARPEGGIO_STAGGER_SEC = 0.1        # Delay between staggered chord notes (s)

# Communication Configuration
UDP_HOST = "127.0.0.1"            # Synthesizer UDP host
UDP_PORT = 5006                   # Synthesizer UDP port

# Status output
STATUS_INTERVAL_SEC = 2.0         # Print status every N seconds

# Frequency Bands (Hz), half-open [low, high). Order matters: it is the
# tie-break order for the dominant band.
FREQ_BANDS: Dict[str, Tuple[float, float]] = {
    "delta": (0.5, 4.0),
    "theta": (4.0, 8.0),
    "alpha": (8.0, 13.0),
    "beta": (13.0, 30.0),
    "gamma": (30.0, 50.0),
}
