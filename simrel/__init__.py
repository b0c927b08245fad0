"""SimRel - Simulation of linear model data with known ground truth.

Generates synthetic regression data with controlled population
properties (number and position of relevant predictors, coefficient of
determination, eigenvalue decay of the predictor covariance) so that
regression and variable-selection methods can be benchmarked against
the true coefficients.

Example:
    >>> from simrel import single_response
    >>>
    >>> sim = single_response(p=10, q=3, relpos=[1, 2, 3], gamma=0.8, R2=0.9, seed=7)
    >>> data = sim.get_data()
    >>> sim.beta, sim.minerror
    >>>
    >>> replicates = sim.simulate_many(50, n_jobs=2)
"""

from importlib.metadata import version as _get_version

from .exceptions import InvalidCovariance, InvalidParameter, InvalidPosition, NotPositiveDefinite, SimRelError
from .model import SimRel, multi_response, paired_response, simulate, single_response
from .progress import PrintReporter, ReplicateProgress, SimulationCancelled, TqdmReporter
from .stats.data_generation import SimulatedData

__version__ = _get_version("SimRel")

__all__ = [
    "SimRel",
    "SimulatedData",
    "simulate",
    "single_response",
    "paired_response",
    "multi_response",
    "SimRelError",
    "InvalidParameter",
    "InvalidPosition",
    "InvalidCovariance",
    "NotPositiveDefinite",
    "SimulationCancelled",
    "ReplicateProgress",
    "PrintReporter",
    "TqdmReporter",
]
