"""
Sample statistics converge to the population quantities.

The covariance check compares the sample covariance of the observed
``(y, x)`` columns with ``observed_sigma``; the OLS checks fit
scikit-learn's ``LinearRegression`` on growing samples and compare with
the true ``beta``.
"""

import numpy as np
import pytest

from simrel import multi_response, paired_response, single_response
from tests.config import COV_REL_TOL, N_LARGE, N_REPLICATES, N_STANDARD, SEED


def _relative_error(estimate, truth):
    return np.linalg.norm(estimate - truth) / np.linalg.norm(truth)


def _ols_coefficients(data):
    sklearn_linear = pytest.importorskip("sklearn.linear_model")
    model = sklearn_linear.LinearRegression().fit(data.x, data.y)
    return model.coef_.T


class TestSampleCovariance:
    """Sample covariance at large n is within tolerance of the population one."""

    @pytest.mark.parametrize(
        "factory,config",
        [
            (single_response, {"p": 10, "q": 3, "relpos": [1, 2, 3], "gamma": 0.8, "R2": 0.9}),
            (paired_response, {"p": 12, "q": [3, 4], "relpos": [[1, 2], [3, 4]], "R2": [0.8, 0.6]}),
            (multi_response, {}),
        ],
    )
    def test_covariance_converges(self, factory, config):
        sim = factory(seed=SEED, **config)
        data = sim.generate(N_LARGE)
        observed = np.column_stack((data.y.reshape(data.n, -1), data.x))
        sample = np.cov(observed, rowvar=False)
        assert _relative_error(sample, sim.properties.observed_sigma) < COV_REL_TOL

    def test_means_near_zero(self):
        data = single_response(seed=SEED).generate(N_LARGE)
        assert np.all(np.abs(data.x.mean(axis=0)) < 0.02)
        assert abs(data.y.mean()) < 0.02

    def test_residual_variance_matches_minerror(self):
        sim = single_response(p=10, q=3, relpos=[1, 2, 3], gamma=0.8, R2=0.9, seed=SEED)
        data = sim.generate(N_LARGE)
        residual = data.y - data.x @ sim.beta
        assert residual.var() == pytest.approx(sim.minerror, rel=COV_REL_TOL)


class TestOLSConsistency:
    """OLS estimates approach the true coefficients as n grows."""

    def _mean_errors(self, sim, sizes):
        errors = []
        for n in sizes:
            replicates = sim.simulate_many(N_REPLICATES, n=n)
            errors.append(np.mean([np.linalg.norm(_ols_coefficients(d).reshape(sim.beta.shape) - sim.beta) for d in replicates]))
        return errors

    def test_single_response_error_decreases(self):
        sim = single_response(p=8, q=4, relpos=[1, 2], gamma=0.3, R2=0.8, seed=SEED)
        errors = self._mean_errors(sim, [100, 1000, 10000])
        assert errors[0] > errors[1] > errors[2]
        assert errors[2] < errors[0] / 3

    def test_multi_response_error_decreases(self):
        sim = multi_response(p=12, q=[4, 5], gamma=0.4, seed=SEED)
        errors = self._mean_errors(sim, [100, 1000, 10000])
        assert errors[0] > errors[1] > errors[2]
        assert errors[2] < errors[0] / 3

    def test_large_sample_recovers_beta(self):
        sim = single_response(p=6, q=3, relpos=[1, 2, 3], gamma=0.2, R2=0.9, seed=SEED)
        coef = _ols_coefficients(sim.generate(N_LARGE)).reshape(-1)
        assert np.allclose(coef, sim.beta, atol=0.02)

    def test_population_beta_on_sample_matches_ols(self):
        from simrel.stats.derivation import population_beta

        sim = multi_response(p=12, q=[4, 5], gamma=0.4, seed=SEED)
        data = sim.generate(N_STANDARD)
        sample = np.cov(np.column_stack((data.y, data.x)), rowvar=False)
        assert np.allclose(population_beta(sample, sim.m), _ols_coefficients(data), atol=1e-8)
