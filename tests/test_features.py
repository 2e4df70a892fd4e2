import numpy as np
import pytest

import brain_music.processing.features as features
from brain_music.core.data_types import Band, BandPowers, EEGWindow
from brain_music.core.errors import DegenerateBand, DegenerateSignal, InvalidInputLength
from brain_music.processing.features import (
    FeatureExtractor,
    band_bin_ranges,
    band_powers_from_psd,
    extract_band_powers,
    normalize_band_powers,
)

from conftest import sine_window


def test_default_bin_ranges() -> None:
    ranges = band_bin_ranges(256, 256.0)
    assert ranges == {
        Band.DELTA: (0, 4),
        Band.THETA: (4, 8),
        Band.ALPHA: (8, 13),
        Band.BETA: (13, 30),
        Band.GAMMA: (30, 50),
    }


def test_bin_ranges_scale_with_resolution() -> None:
    ranges = band_bin_ranges(512, 256.0)
    assert ranges[Band.DELTA] == (1, 8)
    assert ranges[Band.GAMMA] == (60, 100)


def test_short_window_makes_delta_degenerate() -> None:
    with pytest.raises(DegenerateBand) as excinfo:
        band_bin_ranges(8, 256.0)
    assert excinfo.value.band == "delta"


def test_gamma_past_nyquist_is_degenerate() -> None:
    # 64 Hz puts Nyquist at 32 Hz, inside the gamma band
    with pytest.raises(DegenerateBand) as excinfo:
        band_bin_ranges(64, 64.0)
    assert excinfo.value.band == "gamma"
    with pytest.raises(DegenerateBand):
        FeatureExtractor(fs=64.0, window_size=64)
    with pytest.raises(DegenerateBand):
        extract_band_powers(sine_window(20.0, fs=64.0, n_samples=64), 64.0)


def test_band_ending_at_nyquist_is_accepted() -> None:
    ranges = band_bin_ranges(128, 100.0)
    assert ranges[Band.GAMMA][1] <= 128 // 2 + 1


def test_extractor_validates_layout_at_construction() -> None:
    with pytest.raises(DegenerateBand):
        FeatureExtractor(fs=256.0, window_size=8)
    with pytest.raises(InvalidInputLength):
        FeatureExtractor(fs=256.0, window_size=100)


def test_ten_hz_sine_is_alpha_dominant() -> None:
    powers = extract_band_powers(sine_window(10.0), 256.0)
    others = [powers.delta, powers.theta, powers.beta, powers.gamma]
    assert all(powers.alpha > p for p in others)
    assert powers.alpha == pytest.approx(128.0 ** 2 / 5)


def test_band_power_is_mean_of_psd_slice() -> None:
    psd = np.arange(256, dtype=float)
    powers = band_powers_from_psd(psd, band_bin_ranges(256, 256.0))
    assert powers.delta == pytest.approx(np.mean(psd[0:4]))
    assert powers.beta == pytest.approx(np.mean(psd[13:30]))
    assert powers.gamma == pytest.approx(np.mean(psd[30:50]))


def test_psd_is_computed_once_per_window(monkeypatch) -> None:
    calls = []
    original = features.power_spectrum

    def counting_power_spectrum(window):
        calls.append(len(window))
        return original(window)

    monkeypatch.setattr(features, "power_spectrum", counting_power_spectrum)
    extract_band_powers(sine_window(20.0), 256.0)
    assert calls == [256]


def test_band_powers_are_non_negative() -> None:
    rng = np.random.default_rng(7)
    for _ in range(5):
        powers = extract_band_powers(rng.standard_normal(256) * 20, 256.0)
        assert all(p >= 0.0 for _, p in powers.items())


def test_normalized_powers_sum_to_hundred() -> None:
    rng = np.random.default_rng(3)
    normalized = normalize_band_powers(extract_band_powers(rng.standard_normal(256), 256.0))
    assert normalized.total() == pytest.approx(100.0)


def test_normalize_zero_powers_raises() -> None:
    with pytest.raises(DegenerateSignal):
        normalize_band_powers(BandPowers())


def test_zero_window_raises_instead_of_nan() -> None:
    powers = extract_band_powers(np.zeros(256), 256.0)
    assert powers.total() == 0.0
    with pytest.raises(DegenerateSignal):
        normalize_band_powers(powers)


def test_extract_features_averages_channels() -> None:
    extractor = FeatureExtractor(fs=256.0, window_size=256)
    single = extract_band_powers(sine_window(10.0), 256.0)
    data = np.vstack([sine_window(10.0), np.zeros(256)])
    powers = extractor.extract_features(EEGWindow(data=data, timestamp=0.0, fs=256.0))
    assert powers.alpha == pytest.approx(single.alpha / 2)


def test_extract_features_accepts_single_channel() -> None:
    extractor = FeatureExtractor(fs=256.0, window_size=256)
    powers = extractor.extract_features(EEGWindow(data=sine_window(6.0), timestamp=0.0, fs=256.0))
    assert powers.theta > powers.alpha
