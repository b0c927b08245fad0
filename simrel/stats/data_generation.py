"""
Data Generator for SimRel.

Draws i.i.d. multivariate-normal rows from the latent covariance and
maps them into observed predictor/response space:

1. Cholesky-factor the latent covariance (upper triangular).
2. Draw ``(n, m + p)`` standard normals and right-multiply by the factor.
3. Split into response columns ``W`` and predictor columns ``Z``.
4. ``X = Z R_x^T`` and, for more than one response, ``Y = W R_y^T``.
5. Add the optional mean shifts.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd
from scipy import linalg

from ..exceptions import NotPositiveDefinite


@dataclass(frozen=True)
class SimulatedData:
    """One realization of the simulated regression data.

    Attributes:
        x: ``(n, p)`` observed predictors.
        y: ``(n, m)`` observed responses, or ``(n,)`` for a single response.
    """

    x: np.ndarray
    y: np.ndarray

    @property
    def n(self) -> int:
        """Number of rows."""
        return self.x.shape[0]

    def response_names(self) -> List[str]:
        """Column names ``Y1..Ym``."""
        m = 1 if self.y.ndim == 1 else self.y.shape[1]
        return [f"Y{i + 1}" for i in range(m)]

    def predictor_names(self) -> List[str]:
        """Column names ``X1..Xp``."""
        return [f"X{i + 1}" for i in range(self.x.shape[1])]

    def to_frame(self) -> pd.DataFrame:
        """Responses and predictors side by side as a ``DataFrame``."""
        y = self.y.reshape(self.n, -1)
        return pd.DataFrame(
            np.column_stack((y, self.x)),
            columns=self.response_names() + self.predictor_names(),
        )


def _cholesky_decomposition(sigma: np.ndarray) -> np.ndarray:
    """Upper Cholesky factor; raises ``NotPositiveDefinite`` instead of repairing."""
    try:
        return linalg.cholesky(sigma, lower=False)
    except linalg.LinAlgError as e:
        raise NotPositiveDefinite(
            "Latent covariance failed Cholesky factorisation at draw time; it passed the construction check, "
            "so this indicates a corrupted simulation state"
        ) from e


def generate_data(
    n: int,
    sigma: np.ndarray,
    rotation_x: np.ndarray,
    m: int,
    rng: np.random.Generator,
    rotation_y: Optional[np.ndarray] = None,
    mu_x: Optional[np.ndarray] = None,
    mu_y: Optional[np.ndarray] = None,
    squeeze_response: bool = False,
) -> SimulatedData:
    """Draw *n* observed rows from the latent covariance.

    Args:
        n: Number of rows.
        sigma: ``(m+p) x (m+p)`` latent covariance ordered ``(w, z)``.
        rotation_x: ``p x p`` predictor rotation.
        m: Number of response components.
        rng: Random source; one ``(n, m+p)`` standard-normal draw.
        rotation_y: ``m x m`` response rotation, applied when ``m > 1``.
        mu_x: Optional length-``p`` predictor means.
        mu_y: Optional length-``m`` response means.
        squeeze_response: Return ``y`` as a 1-D array (single response).

    Returns:
        ``SimulatedData`` with zero-mean columns unless means are given.

    Raises:
        NotPositiveDefinite: If *sigma* cannot be Cholesky-factored.
    """
    sigma_chol = _cholesky_decomposition(sigma)
    p = sigma.shape[0] - m

    base_normal = rng.standard_normal((n, m + p))
    latent = base_normal @ sigma_chol

    w = latent[:, :m]
    z = latent[:, m:]
    x = z @ rotation_x.T
    y = w @ rotation_y.T if (m > 1 and rotation_y is not None) else w

    if mu_x is not None:
        x = x + mu_x
    if mu_y is not None:
        y = y + mu_y
    if squeeze_response:
        y = y[:, 0]

    return SimulatedData(x=x, y=y)
