"""
Latent covariance construction.

The latent vector is ordered ``(w_1..w_m, z_1..z_p)``: response
components first, then predictor components. The predictor block is
``diag(eigen_x)``, the response block ``diag(eigen_w)`` padded with ones
up to ``m``, and the cross block holds one covariance vector per
response block.
"""

from typing import Sequence

import numpy as np
from scipy import linalg

from ..exceptions import InvalidCovariance


def cross_covariance(
    positions: Sequence[int],
    r2: float,
    eta_weight: float,
    eigenvalues: np.ndarray,
    rng: np.random.Generator,
) -> np.ndarray:
    """Covariance between one latent response component and every predictor component.

    One ``U(-1, 1)`` weight is drawn per relevant position. The target
    ``r2`` is split across the positions in proportion to the weights'
    magnitudes and the weight's sign becomes the covariance sign::

        sigma[pos] = sign(a) * sqrt(r2 * |a| / sum|a| * eigenvalues[pos] * eta_weight)

    so that ``sum(sigma[pos]**2 / eigenvalues[pos]) / eta_weight == r2``.
    Irrelevant positions get zero.

    Args:
        positions: 1-based relevant positions for this response component.
        r2: Target coefficient of determination.
        eta_weight: Variance of the latent response component.
        eigenvalues: Predictor eigenvalues (length ``p``).
        rng: Random source; ``len(positions)`` uniform draws.

    Returns:
        1-D array of length ``p``.
    """
    out = np.zeros(len(eigenvalues))
    idx = np.asarray(positions, dtype=int) - 1
    alpha = rng.uniform(-1, 1, size=idx.size)
    share = np.abs(alpha) / np.sum(np.abs(alpha))
    out[idx] = np.sign(alpha) * np.sqrt(r2 * share * eigenvalues[idx] * eta_weight)
    return out


def cross_covariance_matrix(
    relpred: Sequence[Sequence[int]],
    r2: Sequence[float],
    eigen_w: np.ndarray,
    eigen_x: np.ndarray,
    m: int,
    rng: np.random.Generator,
) -> np.ndarray:
    """Stack per-block cross covariances into a ``p x m`` matrix.

    Column ``i`` belongs to latent response component ``i``; columns
    beyond the number of blocks are zero (pure-noise components).
    """
    out = np.zeros((len(eigen_x), m))
    for i, (positions, rsq) in enumerate(zip(relpred, r2)):
        out[:, i] = cross_covariance(positions, rsq, eigen_w[i], eigen_x, rng)
    return out


def response_covariance(eigen_w: np.ndarray, m: int) -> np.ndarray:
    """Diagonal latent response covariance, padded with unit variances up to *m*."""
    return np.diag(np.concatenate([eigen_w, np.ones(m - len(eigen_w))]))


def assemble_covariance(sigma_w: np.ndarray, sigma_zw: np.ndarray, sigma_z: np.ndarray) -> np.ndarray:
    """Symmetric block matrix ``[[sigma_w, sigma_zw.T], [sigma_zw, sigma_z]]``."""
    return np.block([[sigma_w, sigma_zw.T], [sigma_zw, sigma_z]])


def is_positive_definite(sigma: np.ndarray) -> bool:
    """True if *sigma* is numerically positive definite.

    Every variance must be positive. The matrix is then scaled to unit
    diagonal and every eigenvalue of the scaled matrix must exceed
    ``size * eps``, so a tiny variance such as the tail of a geometric
    spectrum is judged by its correlations only. An R2 within rounding
    of 1 fails.
    """
    variances = np.diag(sigma)
    if not np.all(variances > 0):
        return False
    scale = 1.0 / np.sqrt(variances)
    scaled = sigma * scale[:, None] * scale[None, :]
    eigenvalues = linalg.eigvalsh(scaled)
    return bool(np.all(eigenvalues > sigma.shape[0] * np.finfo(float).eps))


def validate_covariance(sigma: np.ndarray) -> np.ndarray:
    """Return *sigma* unchanged or raise ``InvalidCovariance``."""
    if not np.allclose(sigma, sigma.T):
        raise InvalidCovariance("Latent covariance matrix is not symmetric")
    if not is_positive_definite(sigma):
        raise InvalidCovariance(
            "Latent covariance matrix is not positive definite. "
            "Keep R2 clear of 1, and keep gamma and eta small enough that no eigenvalue underflows to zero."
        )
    return sigma
