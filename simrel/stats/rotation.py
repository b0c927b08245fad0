"""
Random orthogonal rotations used to hide the latent structure.
"""

from typing import Sequence

import numpy as np
from scipy import linalg


def random_rotation(k: int, rng: np.random.Generator) -> np.ndarray:
    """Random ``k x k`` orthogonal matrix.

    Draws a standard-normal matrix, centres each column and keeps the
    orthogonal factor of its QR decomposition.
    """
    qmat = rng.standard_normal((k, k))
    qmat = qmat - qmat.mean(axis=0)
    q_factor, _ = linalg.qr(qmat)
    return q_factor


def embed_rotations(size: int, groups: Sequence[Sequence[int]], rng: np.random.Generator) -> np.ndarray:
    """Identity of order *size* with an independent rotation on each group.

    Args:
        size: Order of the returned matrix (``p`` or ``m``).
        groups: 1-based position groups, rotated in the given order.
            Positions not in any group keep identity rows/columns.
        rng: Random source; one rotation draw per non-empty group.

    Returns:
        ``size x size`` orthogonal, block-diagonal up to a permutation.
    """
    out = np.eye(size)
    for positions in groups:
        if len(positions) == 0:
            continue
        idx = np.asarray(positions, dtype=int) - 1
        out[np.ix_(idx, idx)] = random_rotation(idx.size, rng)
    return out
