"""
Tests for closed-form model quantities.
"""

import numpy as np
import pytest

from simrel.stats.covariance import assemble_covariance, cross_covariance_matrix, response_covariance
from simrel.stats.derivation import derive_model_terms, population_beta
from simrel.stats.eigen import eigen_spectrum
from simrel.stats.rotation import embed_rotations
from tests.config import EXACT_TOL


def _build(rng, p=12, m=3, relpred=((1, 2, 6), (3, 4)), r2=(0.7, 0.9), gamma=0.8, eta=0.4, ypos=((1,), (2, 3))):
    eigen_x = eigen_spectrum(gamma, p)
    eigen_w = eigen_spectrum(eta, len(relpred))
    sigma_w = response_covariance(eigen_w, m)
    sigma_zw = cross_covariance_matrix(relpred, r2, eigen_w, eigen_x, m, rng)
    sigma = assemble_covariance(sigma_w, sigma_zw, np.diag(eigen_x))
    irrelpred = tuple(sorted(set(range(1, p + 1)) - {pos for block in relpred for pos in block}))
    rotation_x = embed_rotations(p, list(relpred) + [irrelpred], rng)
    rotation_y = embed_rotations(m, ypos, rng)
    terms = derive_model_terms(eigen_x, sigma_w, sigma_zw, sigma, rotation_x, rotation_y)
    return terms, dict(eigen_x=eigen_x, sigma_w=sigma_w, sigma_zw=sigma_zw, sigma=sigma, rotation_x=rotation_x, rotation_y=rotation_y)


class TestDeriveModelTerms:
    """Test derive_model_terms function."""

    def test_latent_r2_diagonal_matches_targets(self, rng):
        terms, _ = _build(rng)
        assert np.allclose(np.diag(terms.rsq_w), [0.7, 0.9, 0.0], atol=EXACT_TOL)
        # Disjoint relevant blocks: no cross-explained covariance
        off_diag = terms.rsq_w - np.diag(np.diag(terms.rsq_w))
        assert np.allclose(off_diag, 0, atol=EXACT_TOL)

    def test_beta_z_is_cross_over_eigenvalues(self, rng):
        terms, parts = _build(rng)
        assert np.allclose(terms.beta_z, terms.sigma_zinv @ parts["sigma_zw"])

    def test_beta_matches_population_regression(self, rng):
        terms, _ = _build(rng)
        assert np.allclose(population_beta(terms.observed_sigma, 3), terms.beta, atol=1e-10)

    def test_observed_covariance_blocks(self, rng):
        terms, parts = _build(rng)
        m = 3
        assert np.allclose(terms.observed_sigma[:m, :m], terms.sigma_y)
        assert np.allclose(terms.observed_sigma[m:, m:], terms.sigma_x)
        assert np.allclose(terms.observed_sigma[m:, :m], terms.sigma_xy)

    def test_minerror_is_residual_covariance(self, rng):
        terms, _ = _build(rng)
        sigma_xx = terms.sigma_x
        sigma_xy = terms.sigma_xy
        residual = terms.sigma_y - sigma_xy.T @ np.linalg.solve(sigma_xx, sigma_xy)
        assert np.allclose(terms.minerror, residual, atol=1e-10)

    def test_response_r2_rotation_invariant_total(self, rng):
        terms, parts = _build(rng)
        explained_total = np.sum(terms.response_r2 * np.diag(terms.sigma_y))
        eigen_w = np.diag(parts["sigma_w"])
        assert explained_total == pytest.approx(0.7 * eigen_w[0] + 0.9 * eigen_w[1], abs=EXACT_TOL)

    def test_single_response_scalar_forms(self, rng):
        terms, _ = _build(rng, m=1, relpred=((1, 2, 3),), r2=(0.9,), ypos=((1,),))
        assert terms.rsq_w.shape == (1, 1)
        assert terms.rsq_w[0, 0] == pytest.approx(0.9, abs=EXACT_TOL)
        assert terms.minerror[0, 0] == pytest.approx(0.1, abs=EXACT_TOL)

    def test_sigma_x_is_rotated_diagonal(self, rng):
        terms, parts = _build(rng)
        eigvals = np.sort(np.linalg.eigvalsh(terms.sigma_x))[::-1]
        assert np.allclose(eigvals, np.sort(parts["eigen_x"])[::-1])
