"""
Tests for eigenvalue spectra.
"""

import numpy as np
import pytest

from simrel.stats.eigen import eigen_spectrum


class TestEigenSpectrum:
    """Test eigen_spectrum function."""

    def test_first_eigenvalue_is_one(self):
        assert eigen_spectrum(0.8, 10)[0] == 1.0

    def test_matches_closed_form(self):
        gamma, k = 0.8, 10
        i = np.arange(1, k + 1)
        expected = np.exp(-gamma * i) / np.exp(-gamma)
        assert np.allclose(eigen_spectrum(gamma, k), expected)

    @pytest.mark.parametrize("gamma", [0.01, 0.3, 0.8, 2.0])
    def test_strictly_decreasing(self, gamma):
        eigenvalues = eigen_spectrum(gamma, 25)
        assert np.all(np.diff(eigenvalues) < 0)

    def test_zero_decay_gives_ones(self):
        assert np.array_equal(eigen_spectrum(0.0, 7), np.ones(7))

    def test_strictly_positive(self):
        assert np.all(eigen_spectrum(3.0, 50) > 0)

    def test_length(self):
        assert eigen_spectrum(0.5, 1).shape == (1,)
        assert eigen_spectrum(0.5, 13).shape == (13,)

    def test_floor_applied_with_warning(self):
        with pytest.warns(UserWarning, match="lambda_min"):
            eigenvalues = eigen_spectrum(1.0, 20, lambda_min=1e-3)
        assert eigenvalues.min() == pytest.approx(1e-3)
        assert np.all(np.diff(eigenvalues) <= 0)

    def test_inactive_floor_no_warning(self, recwarn):
        eigenvalues = eigen_spectrum(0.8, 10, lambda_min=1e-5)
        assert np.allclose(eigenvalues, eigen_spectrum(0.8, 10))
        assert len(recwarn) == 0
