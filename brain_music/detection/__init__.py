"""
Mental state detection

This module classifies band powers into mental states and emotions.
"""

from .state_classifier import BAND_STATES, StateDetector, classify, dominant_band

__all__ = ['BAND_STATES', 'StateDetector', 'classify', 'dominant_band']
