"""
Construction pipeline for the derived properties of a simulation.

Every property is a plain function of parameters and properties computed
before it. The pipeline runs once, in a fixed order, and the random
source is consumed in this order:

1. relevant positions, blocks in declaration order;
2. cross-covariance weights, blocks in declaration order;
3. predictor rotations, relevant blocks in declaration order, then the
   irrelevant block;
4. response rotations, ``ypos`` groups in declaration order.

Changing that order changes every result under a fixed seed.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

from ..stats.covariance import (
    assemble_covariance,
    cross_covariance_matrix,
    response_covariance,
    validate_covariance,
)
from ..stats.derivation import derive_model_terms
from ..stats.eigen import eigen_spectrum
from ..stats.positions import allocate_positions
from ..stats.rotation import embed_rotations
from .parameters import SimulationParameters

MatrixOrScalar = Union[np.ndarray, float]


@dataclass(frozen=True)
class SimulationProperties:
    """Frozen derived properties of one simulation.

    For the single-response layout, response-indexed quantities are
    reported the way a single regression reads them: ``relpred`` is a
    flat tuple, coefficient and cross-covariance vectors are 1-D of
    length ``p``, and ``sigma_w``, ``sigma_y``, ``rsq_w``, ``rsq_y``,
    ``response_r2`` and ``minerror`` are floats. ``rotation_y`` is
    ``None`` there. All arrays are read-only.
    """

    relpred: Union[Tuple[int, ...], Tuple[Tuple[int, ...], ...]]
    irrelpred: Tuple[int, ...]
    eigen_x: np.ndarray
    eigen_w: np.ndarray
    sigma_z: np.ndarray
    sigma_zinv: np.ndarray
    sigma_w: MatrixOrScalar
    sigma_zw: np.ndarray
    sigma: np.ndarray
    rotation_x: np.ndarray
    rotation_y: Optional[np.ndarray]
    beta_z: np.ndarray
    beta: np.ndarray
    sigma_x: np.ndarray
    sigma_y: MatrixOrScalar
    sigma_zy: np.ndarray
    sigma_xy: np.ndarray
    rsq_w: MatrixOrScalar
    rsq_y: MatrixOrScalar
    response_r2: MatrixOrScalar
    minerror: MatrixOrScalar
    observed_sigma: np.ndarray

    def as_dict(self) -> Dict[str, Any]:
        """Shallow mapping of property name to value."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _freeze(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        value.flags.writeable = False
    return value


def _single(value: np.ndarray) -> Any:
    """Collapse a response-indexed quantity for the one-response layout."""
    if value.ndim == 2 and value.shape == (1, 1):
        return float(value[0, 0])
    if value.ndim == 2 and value.shape[1] == 1:
        return value[:, 0]
    if value.ndim == 1 and value.size == 1:
        return float(value[0])
    return value


def build_properties(params: SimulationParameters, rng: np.random.Generator) -> SimulationProperties:
    """Run the full construction pipeline.

    Args:
        params: Validated parameters.
        rng: Random source for positions, covariance weights and rotations.

    Returns:
        ``SimulationProperties``; nothing is returned if any step fails.

    Raises:
        InvalidPosition: If positions cannot be allocated.
        InvalidCovariance: If the latent covariance is not positive definite.
    """
    p, m = params.p, params.m
    is_single = params.layout == "single"

    relpred, irrelpred = allocate_positions(p, params.q, params.relpos, rng)

    eigen_x = eigen_spectrum(params.gamma, p, params.lambda_min)
    eigen_w = np.ones(1) if is_single else eigen_spectrum(params.eta, params.n_blocks)
    sigma_z = np.diag(eigen_x)
    sigma_w = response_covariance(eigen_w, m)

    sigma_zw = cross_covariance_matrix(relpred, params.R2, eigen_w, eigen_x, m, rng)
    sigma = validate_covariance(assemble_covariance(sigma_w, sigma_zw, sigma_z))

    rotation_x = embed_rotations(p, list(relpred) + [irrelpred], rng)
    rotation_y = np.eye(1) if is_single else embed_rotations(m, params.ypos, rng)

    terms = derive_model_terms(eigen_x, sigma_w, sigma_zw, sigma, rotation_x, rotation_y)

    response_indexed = {
        "sigma_w": sigma_w,
        "sigma_zw": sigma_zw,
        "beta_z": terms.beta_z,
        "beta": terms.beta,
        "sigma_y": terms.sigma_y,
        "sigma_zy": terms.sigma_zy,
        "sigma_xy": terms.sigma_xy,
        "rsq_w": terms.rsq_w,
        "rsq_y": terms.rsq_y,
        "response_r2": terms.response_r2,
        "minerror": terms.minerror,
    }
    if is_single:
        response_indexed = {key: _single(value) for key, value in response_indexed.items()}

    values = dict(
        relpred=relpred[0] if is_single else relpred,
        irrelpred=irrelpred,
        eigen_x=eigen_x,
        eigen_w=eigen_w,
        sigma_z=sigma_z,
        sigma_zinv=terms.sigma_zinv,
        sigma=sigma,
        rotation_x=rotation_x,
        rotation_y=None if is_single else rotation_y,
        sigma_x=terms.sigma_x,
        observed_sigma=terms.observed_sigma,
        **response_indexed,
    )
    return SimulationProperties(**{key: _freeze(value) for key, value in values.items()})
