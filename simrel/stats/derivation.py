"""
Closed-form model quantities implied by the latent covariance.

With ``z`` latent predictors, ``w`` latent responses, observed
``x = R_x z`` and ``y = R_y w`` (row-wise ``X = Z R_x^T``,
``Y = W R_y^T``), the population regression of ``y`` on ``x`` is known
exactly::

    beta_z = sigma_z^-1 sigma_zw
    beta   = R_x beta_z R_y^T

and everything below follows from ``sigma`` and the two rotations.
"""

from dataclasses import dataclass

import numpy as np
from scipy import linalg


@dataclass(frozen=True)
class ModelTerms:
    """True regression quantities for one simulation.

    Matrix shapes use ``p`` predictors and ``m`` responses.

    Attributes:
        sigma_zinv: ``p x p`` inverse of the diagonal predictor block.
        beta_z: ``p x m`` latent regression coefficients.
        beta: ``p x m`` observed-space regression coefficients.
        sigma_x: ``p x p`` observed predictor covariance.
        sigma_y: ``m x m`` observed response covariance.
        sigma_zy: ``p x m`` covariance of latent predictors with observed responses.
        sigma_xy: ``p x m`` covariance of observed predictors with observed responses.
        explained_w: ``m x m`` latent response covariance explained by ``z``.
        rsq_w: ``m x m`` latent coefficient-of-determination matrix.
        rsq_y: ``rsq_w`` rotated into observed response space.
        response_r2: Length-``m`` R² of each observed response.
        minerror: ``m x m`` residual covariance of the best linear predictor.
        observed_sigma: ``(m+p) x (m+p)`` covariance of the observed ``(y, x)``.
    """

    sigma_zinv: np.ndarray
    beta_z: np.ndarray
    beta: np.ndarray
    sigma_x: np.ndarray
    sigma_y: np.ndarray
    sigma_zy: np.ndarray
    sigma_xy: np.ndarray
    explained_w: np.ndarray
    rsq_w: np.ndarray
    rsq_y: np.ndarray
    response_r2: np.ndarray
    minerror: np.ndarray
    observed_sigma: np.ndarray


def derive_model_terms(
    eigen_x: np.ndarray,
    sigma_w: np.ndarray,
    sigma_zw: np.ndarray,
    sigma: np.ndarray,
    rotation_x: np.ndarray,
    rotation_y: np.ndarray,
) -> ModelTerms:
    """Compute every true model quantity from the latent covariance.

    Args:
        eigen_x: Predictor eigenvalues (diagonal of the predictor block).
        sigma_w: ``m x m`` latent response block.
        sigma_zw: ``p x m`` latent cross block.
        sigma: Full latent covariance, ordered ``(w, z)``.
        rotation_x: ``p x p`` predictor rotation.
        rotation_y: ``m x m`` response rotation (identity for one response).

    Returns:
        ``ModelTerms``.
    """
    # Predictor block is diagonal, so its inverse is elementwise
    sigma_zinv = np.diag(1.0 / eigen_x)
    beta_z = sigma_zw / eigen_x[:, None]
    beta = rotation_x @ beta_z @ rotation_y.T

    explained_w = sigma_zw.T @ beta_z
    rsq_w = explained_w @ np.linalg.inv(sigma_w)
    rsq_y = rotation_y @ rsq_w @ rotation_y.T

    sigma_x = rotation_x @ np.diag(eigen_x) @ rotation_x.T
    sigma_y = rotation_y @ sigma_w @ rotation_y.T
    sigma_zy = sigma_zw @ rotation_y.T
    sigma_xy = rotation_x @ sigma_zy

    explained_y = rotation_y @ explained_w @ rotation_y.T
    response_r2 = np.diag(explained_y) / np.diag(sigma_y)
    minerror = sigma_y - explained_y

    transform = linalg.block_diag(rotation_y, rotation_x)
    observed_sigma = transform @ sigma @ transform.T

    return ModelTerms(
        sigma_zinv=sigma_zinv,
        beta_z=beta_z,
        beta=beta,
        sigma_x=sigma_x,
        sigma_y=sigma_y,
        sigma_zy=sigma_zy,
        sigma_xy=sigma_xy,
        explained_w=explained_w,
        rsq_w=rsq_w,
        rsq_y=rsq_y,
        response_r2=response_r2,
        minerror=minerror,
        observed_sigma=observed_sigma,
    )


def population_beta(observed_sigma: np.ndarray, m: int) -> np.ndarray:
    """Regression coefficients of ``y`` on ``x`` solved directly from a covariance.

    Equals ``beta`` from ``derive_model_terms`` when given the observed
    population covariance; applied to a sample covariance it gives the
    OLS slope estimate with intercept.
    """
    sigma_xx = observed_sigma[m:, m:]
    sigma_xy = observed_sigma[m:, :m]
    return linalg.solve(sigma_xx, sigma_xy, assume_a="pos")
