"""Seeded lattice value noise used for the static "city fabric" texture.

Smooth, deterministic pseudo-random function of up to three coordinates.
Same seed and same coordinates always give the same value in [0, 1].
"""

from __future__ import annotations

import numpy as np

_TABLE_SIZE = 256
_TABLE_MASK = _TABLE_SIZE - 1


def _smoothstep(t: np.ndarray) -> np.ndarray:
    return t * t * (3.0 - 2.0 * t)


class ValueNoise:
    """Octave-summed value noise over a seeded permutation lattice."""

    def __init__(self, seed: int = 0, octaves: int = 4, falloff: float = 0.5) -> None:
        if octaves < 1:
            raise ValueError("octaves must be >= 1")
        if not 0.0 < falloff <= 1.0:
            raise ValueError("falloff must be in (0.0, 1.0]")
        rng = np.random.default_rng(seed)
        self.seed = seed
        self.octaves = octaves
        self.falloff = falloff
        self._perm = rng.permutation(_TABLE_SIZE).astype(np.int64)
        self._values = rng.random(_TABLE_SIZE)
        amplitudes = falloff ** np.arange(octaves)
        self._amplitudes = amplitudes / amplitudes.sum()

    def _lattice(self, ix: np.ndarray, iy: np.ndarray, iz: np.ndarray) -> np.ndarray:
        perm = self._perm
        h = perm[ix & _TABLE_MASK]
        h = perm[(h + iy) & _TABLE_MASK]
        h = perm[(h + iz) & _TABLE_MASK]
        return self._values[h]

    def _octave(self, x: np.ndarray, y: np.ndarray, z: np.ndarray) -> np.ndarray:
        x0 = np.floor(x)
        y0 = np.floor(y)
        z0 = np.floor(z)
        tx = _smoothstep(x - x0)
        ty = _smoothstep(y - y0)
        tz = _smoothstep(z - z0)
        ix = x0.astype(np.int64)
        iy = y0.astype(np.int64)
        iz = z0.astype(np.int64)

        def _lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
            return a + (b - a) * t

        def _plane(kz: np.ndarray) -> np.ndarray:
            c00 = self._lattice(ix, iy, kz)
            c10 = self._lattice(ix + 1, iy, kz)
            c01 = self._lattice(ix, iy + 1, kz)
            c11 = self._lattice(ix + 1, iy + 1, kz)
            return _lerp(_lerp(c00, c10, tx), _lerp(c01, c11, tx), ty)

        return _lerp(_plane(iz), _plane(iz + 1), tz)

    def __call__(
        self,
        x: float | np.ndarray,
        y: float | np.ndarray = 0.0,
        z: float | np.ndarray = 0.0,
    ) -> float | np.ndarray:
        """Sample noise; arrays broadcast, all-scalar input returns a float."""
        xa, ya, za = np.broadcast_arrays(
            np.asarray(x, dtype=float), np.asarray(y, dtype=float), np.asarray(z, dtype=float)
        )
        total = np.zeros(xa.shape, dtype=float)
        frequency = 1.0
        for amplitude in self._amplitudes:
            total += amplitude * self._octave(xa * frequency, ya * frequency, za * frequency)
            frequency *= 2.0
        if total.ndim == 0:
            return float(total)
        return total
