"""
Shared pytest fixtures for SimRel tests.
"""

import numpy as np
import pytest

from tests.config import SEED


@pytest.fixture
def rng():
    """Fresh seeded generator."""
    return np.random.default_rng(SEED)


@pytest.fixture
def single_sim():
    """Single-response simulation from the reference scenario."""
    from simrel import single_response

    return single_response(n=100, p=10, q=3, relpos=[1, 2, 3], gamma=0.8, R2=0.9, seed=SEED)


@pytest.fixture
def paired_sim():
    """Two correlated responses from disjoint relevant blocks."""
    from simrel import paired_response

    return paired_response(n=100, p=12, q=[3, 4], relpos=[[1, 2], [3, 4]], gamma=0.6, eta=0.5, R2=[0.8, 0.6], seed=SEED)


@pytest.fixture
def multi_sim():
    """Three responses, two informative blocks (layout defaults)."""
    from simrel import multi_response

    return multi_response(seed=SEED)


# Test data constants
VALID_SINGLE_CONFIGS = [
    {"p": 10, "q": 3, "relpos": [1, 2, 3], "gamma": 0.8, "R2": 0.9},
    {"p": 20, "q": 10, "relpos": [1, 2, 3], "gamma": 0.2, "R2": 0.5},
    {"p": 5, "q": 5, "relpos": [1, 2, 3, 4, 5], "gamma": 0.0, "R2": 0.3},
    {"p": 25, "q": 1, "relpos": [7], "gamma": 1.0, "R2": 0.99},
]

VALID_MULTI_CONFIGS = [
    {"p": 20, "q": [6, 7], "relpos": [[1, 2], [3, 4, 5]], "R2": [0.7, 0.9], "m": 3},
    {"p": 15, "q": [2, 2, 2], "relpos": [[1], [2], [3]], "R2": [0.5, 0.6, 0.7], "m": 4, "eta": 0.0},
    {"p": 8, "q": [4], "relpos": [[1, 2]], "R2": [0.8], "m": 2, "ypos": [[1, 2]]},
]
