"""
EEG signal sources

This module provides synthetic and replayed sample-window sources.
"""

from .sources import SyntheticEEGSource, ReplaySource

__all__ = ['SyntheticEEGSource', 'ReplaySource']
