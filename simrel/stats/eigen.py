"""
Eigenvalue spectra for latent predictor and response components.
"""

import warnings
from typing import Optional

import numpy as np


def eigen_spectrum(decay: float, k: int, lambda_min: Optional[float] = None) -> np.ndarray:
    """Geometrically decaying eigenvalues normalised so the first equals 1.

    ``e_i = exp(-decay * i) / exp(-decay)`` for ``i = 1..k``. Strictly
    decreasing for ``decay > 0`` and all ones for ``decay == 0``.

    Args:
        decay: Non-negative decay rate (``gamma`` for predictors,
            ``eta`` for response components).
        k: Number of eigenvalues.
        lambda_min: Optional floor. Eigenvalues below it are raised to
            it, which makes the tail of the spectrum constant.

    Returns:
        1-D array of length *k*.
    """
    idx = np.arange(1, k + 1)
    eigenvalues = np.exp(-decay * (idx - 1))

    if lambda_min is not None and np.any(eigenvalues < lambda_min):
        n_floored = int(np.sum(eigenvalues < lambda_min))
        warnings.warn(
            f"{n_floored} of {k} eigenvalues fall below lambda_min={lambda_min:g} and were raised to it; "
            "the spectrum is no longer strictly decreasing",
            UserWarning,
            stacklevel=2,
        )
        eigenvalues = np.maximum(eigenvalues, lambda_min)

    return eigenvalues
