"""
Spectral analysis of sample windows

This module implements a radix-2 fast Fourier transform. The transform is
iterative: the input is permuted into bit-reversed order and then combined in
log2(n) butterfly stages, so large windows never hit a recursion limit.
"""

from typing import Sequence, Union
import numpy as np

from ..core.errors import InvalidInputLength

ArrayLike = Union[Sequence[float], np.ndarray]


def is_power_of_two(n: int) -> bool:
    """True when n is a positive power of two"""
    return n >= 1 and (n & (n - 1)) == 0


def _as_window(window: ArrayLike, dtype=np.float64) -> np.ndarray:
    """Validate a 1-D power-of-two window"""
    values = np.asarray(window, dtype=dtype)
    if values.ndim != 1:
        raise InvalidInputLength(int(values.size))
    if not is_power_of_two(len(values)):
        raise InvalidInputLength(len(values))
    return values


def bit_reversal_permutation(n: int) -> np.ndarray:
    """
    Indices that reorder a length-n sequence into bit-reversed order

    Args:
        n: Sequence length (power of two)

    Returns:
        np.ndarray: Permutation indices
    """
    bits = n.bit_length() - 1
    indices = np.arange(n)
    reversed_indices = np.zeros(n, dtype=np.intp)
    for b in range(bits):
        reversed_indices |= ((indices >> b) & 1) << (bits - 1 - b)
    return reversed_indices


def _butterfly(values: np.ndarray, sign: float) -> np.ndarray:
    """Run all butterfly stages on a copy of values (length power of two)"""
    n = len(values)
    out = values[bit_reversal_permutation(n)].astype(np.complex128)

    size = 2
    while size <= n:
        half = size // 2
        twiddles = np.exp(sign * 2j * np.pi * np.arange(half) / size)
        # Each row is one block of the current stage; rows are views into out
        blocks = out.reshape(-1, size)
        even = blocks[:, :half].copy()
        odd = blocks[:, half:] * twiddles
        blocks[:, :half] = even + odd
        blocks[:, half:] = even - odd
        size *= 2

    return out


def transform(window: ArrayLike) -> np.ndarray:
    """
    Forward discrete Fourier transform of a real sample window

    Args:
        window: Real samples, length must be a power of two

    Returns:
        np.ndarray: Complex spectrum of the same length (new array)

    Raises:
        InvalidInputLength: If the length is not a power of two
    """
    values = _as_window(window)
    return _butterfly(values, -1.0)


def inverse_transform(spectrum: ArrayLike) -> np.ndarray:
    """
    Inverse transform, so that inverse_transform(transform(x)) ~= x

    Args:
        spectrum: Complex spectrum, length must be a power of two

    Returns:
        np.ndarray: Complex time-domain samples
    """
    values = _as_window(spectrum, dtype=np.complex128)
    return _butterfly(values, 1.0) / len(values)


def direct_transform(window: ArrayLike) -> np.ndarray:
    """O(n^2) direct summation, kept as a reference for the fast transform"""
    values = _as_window(window)
    n = len(values)
    k = np.arange(n)
    basis = np.exp(-2j * np.pi * np.outer(k, k) / n)
    return basis @ values


def power_spectrum(window: ArrayLike) -> np.ndarray:
    """Squared magnitude of the spectrum, one value per bin"""
    spectrum = transform(window)
    return spectrum.real ** 2 + spectrum.imag ** 2
