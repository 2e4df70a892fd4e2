import numpy as np
import pytest

from brain_music.acquisition.sources import RHYTHM_FREQS, ReplaySource, SyntheticEEGSource
from brain_music.core.data_types import Band, EEGWindow
from brain_music.detection.state_classifier import dominant_band
from brain_music.processing.features import FeatureExtractor


def test_synthetic_window_shape() -> None:
    source = SyntheticEEGSource(fs=256, n_channels=4, rng=np.random.default_rng(0))
    data = source.get_data(256)
    assert data.shape == (4, 256)
    assert source.time == pytest.approx(0.1)


@pytest.mark.parametrize("index, band", list(enumerate(Band)))
def test_synthetic_source_rotates_dominant_band(index: int, band: Band) -> None:
    source = SyntheticEEGSource(fs=256, n_channels=4, rng=np.random.default_rng(index))
    source.time = index * source.state_cycle_time + 1.0
    assert source.emphasized_band_index() == index

    extractor = FeatureExtractor(fs=256, window_size=256)
    powers = extractor.extract_features(EEGWindow(source.get_data(256), 0.0, 256))
    assert dominant_band(powers) is band


def test_rhythms_fall_inside_their_bands() -> None:
    from brain_music.core.config import FREQ_BANDS

    for band, freq in zip(Band, RHYTHM_FREQS):
        low, high = FREQ_BANDS[band.value]
        assert low <= freq < high


def test_replay_wraps_around() -> None:
    recording = np.arange(10, dtype=float).reshape(1, 10)
    source = ReplaySource(recording, fs=256, hop_samples=6)
    np.testing.assert_array_equal(source.get_data(4), [[0, 1, 2, 3]])
    np.testing.assert_array_equal(source.get_data(8), [[6, 7, 8, 9, 0, 1, 2, 3]])
    assert source.position == 2


def test_replay_without_loop_runs_dry() -> None:
    source = ReplaySource(np.ones(8), fs=256, hop_samples=4, loop=False)
    assert source.get_data(4).shape == (1, 4)
    assert source.get_data(4).shape == (1, 4)
    assert source.get_data(4) is None


def test_replay_from_file(tmp_path) -> None:
    path = tmp_path / "session.npy"
    np.save(path, np.zeros((3, 512)))
    source = ReplaySource.from_file(str(path), fs=256)
    assert source.n_channels == 3
    assert source.get_data(256).shape == (3, 256)


def test_replay_rejects_empty_recording() -> None:
    with pytest.raises(ValueError):
        ReplaySource(np.zeros((2, 0)))
