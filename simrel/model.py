"""
SimRel - Simulation of linear model data with known ground truth.

This module provides the main SimRel class and one entry point per
response layout.
"""

import warnings
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from .core import ReplicateRunner, SimulationParameters, SimulationProperties, build_parameters, build_properties
from .exceptions import InvalidParameter
from .progress import ReplicateProgress
from .stats.data_generation import SimulatedData, generate_data
from .utils.validators import _validate_count, _validate_parallel_settings


class SimRel:
    """Simulated linear-model data with controlled population properties.

    Builds a latent covariance over response and predictor components
    with a requested eigenvalue decay and coefficient of determination,
    hides it behind random rotations, and keeps the true regression
    coefficients and minimum achievable error in closed form.

    Construction is all-or-nothing: parameters, relevant positions,
    covariance, rotations and derived quantities are computed once in a
    fixed order and frozen. After that, every ``generate`` call is a
    fresh independent draw from the same population.

    Response layouts:
        - ``"single"``: one response, scalar ``q`` and ``R2``, flat ``relpos``.
        - ``"paired"``: two responses from two disjoint relevant blocks,
          rotated together (``ypos=[[1, 2]]``) so the observed pair is correlated.
        - ``"multi"``: ``k`` blocks and ``m >= k`` responses grouped by ``ypos``.

    Attributes:
        parameters: Frozen ``SimulationParameters``.
        properties: Frozen ``SimulationProperties``.

    Example:
        >>> sim = SimRel("single", p=10, q=3, relpos=[1, 2, 3], gamma=0.8, R2=0.9, seed=1)
        >>> data = sim.get_data()
        >>> data.x.shape, data.y.shape
        ((100, 10), (100,))
        >>> round(sim.minerror, 10)
        0.1
    """

    def __init__(self, layout: str = "single", **config: Any):
        """Validate parameters and build the simulation.

        Args:
            layout: ``"single"``, ``"paired"`` or ``"multi"``.
            **config: Simulation options (``n``, ``p``, ``q``, ``relpos``,
                ``gamma``, ``eta``, ``R2``, ``m``, ``ypos``, ``lambda_min``,
                ``ntest``, ``mu_x``, ``mu_y``, ``seed``). Missing options
                take the layout defaults in ``DEFAULT_PARAMETERS``.

        Raises:
            InvalidParameter: On invalid or inconsistent options.
            InvalidPosition: If relevant/response positions are invalid.
            InvalidCovariance: If the latent covariance is not positive definite.
        """
        params, param_warnings = build_parameters(layout, config)
        for message in param_warnings:
            warnings.warn(message, UserWarning, stacklevel=2)

        rng = np.random.default_rng(params.seed)
        properties = build_properties(params, rng)

        self._parameters: SimulationParameters = params
        self._properties: SimulationProperties = properties
        self._rng = rng

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SimRel":
        """Build from a mapping; an optional ``"layout"`` key selects the layout."""
        options = dict(config)
        layout = options.pop("layout", "single")
        return cls(layout, **options)

    def __repr__(self) -> str:
        params = self._parameters
        return f"SimRel(layout={params.layout!r}, n={params.n}, p={params.p}, q={params.q}, m={params.m}, R2={params.R2})"

    # =========================================================================
    # Parameters
    # =========================================================================

    @property
    def parameters(self) -> SimulationParameters:
        """Validated input parameters."""
        return self._parameters

    @property
    def layout(self) -> str:
        """Response layout tag."""
        return self._parameters.layout

    @property
    def n(self) -> int:
        """Default number of rows per draw."""
        return self._parameters.n

    @property
    def p(self) -> int:
        """Number of predictors."""
        return self._parameters.p

    @property
    def m(self) -> int:
        """Number of responses."""
        return self._parameters.m

    def get_parameter(self, name: str) -> Any:
        """Look up one parameter by name (user-facing form)."""
        params = self._parameters.as_dict()
        if name not in params:
            raise KeyError(f"Unknown parameter '{name}'. Available: {', '.join(params)}")
        return params[name]

    def list_parameters(self) -> List[str]:
        """Names of parameters that are set (not ``None``)."""
        return [key for key, value in self._parameters.as_dict().items() if value is not None]

    # =========================================================================
    # Derived properties
    # =========================================================================

    @property
    def properties(self) -> SimulationProperties:
        """Frozen derived properties."""
        return self._properties

    @property
    def relpred(self):
        """Relevant predictor positions (1-based), per block for multi-response layouts."""
        return self._properties.relpred

    @property
    def eigen_x(self) -> np.ndarray:
        """Predictor eigenvalues."""
        return self._properties.eigen_x

    @property
    def sigma(self) -> np.ndarray:
        """Latent covariance ordered ``(responses, predictors)``."""
        return self._properties.sigma

    @property
    def rotation_x(self) -> np.ndarray:
        """Predictor rotation."""
        return self._properties.rotation_x

    @property
    def rotation_y(self) -> Optional[np.ndarray]:
        """Response rotation (``None`` for a single response)."""
        return self._properties.rotation_y

    @property
    def beta(self) -> np.ndarray:
        """True regression coefficients in observed space."""
        return self._properties.beta

    @property
    def beta_z(self) -> np.ndarray:
        """True regression coefficients in latent space."""
        return self._properties.beta_z

    @property
    def rsq(self):
        """Coefficient of determination (``rsq_y``)."""
        return self._properties.rsq_y

    @property
    def minerror(self):
        """Minimum achievable prediction error (residual variance/covariance)."""
        return self._properties.minerror

    def get_property(self, name: str) -> Any:
        """Look up one derived property by name."""
        props = self._properties.as_dict()
        if name not in props:
            raise KeyError(f"Unknown property '{name}'. Available: {', '.join(props)}")
        return props[name]

    def list_properties(self) -> List[str]:
        """Names of derived properties that are set (not ``None``)."""
        return [key for key, value in self._properties.as_dict().items() if value is not None]

    def snapshot(self) -> Dict[str, Any]:
        """Parameters and derived properties, for the caller to persist."""
        return {
            "parameters": self._parameters.as_dict(),
            "properties": self._properties.as_dict(),
        }

    # =========================================================================
    # Data generation
    # =========================================================================

    def _draw_func(self, n: int) -> Callable[..., SimulatedData]:
        params, props = self._parameters, self._properties
        return partial(
            generate_data,
            n,
            props.sigma,
            props.rotation_x,
            params.m,
            rotation_y=props.rotation_y,
            mu_x=None if params.mu_x is None else np.asarray(params.mu_x),
            mu_y=None if params.mu_y is None else np.asarray(params.mu_y),
            squeeze_response=params.layout == "single",
        )

    def generate(self, n: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> SimulatedData:
        """Draw one realization of the observed predictors and responses.

        Args:
            n: Number of rows (defaults to the ``n`` parameter).
            rng: Random source for this draw. Defaults to the instance
                stream, which advances with every call; pass separate
                generators (see ``spawn_generators``) to draw concurrently.

        Returns:
            ``SimulatedData`` with ``x`` of shape ``(n, p)`` and ``y`` of
            shape ``(n, m)`` (``(n,)`` for a single response).
        """
        if n is None:
            n = self._parameters.n
        _validate_count(n, "n").raise_if_invalid()
        return self._draw_func(int(n))(rng=self._rng if rng is None else rng)

    def get_data(self) -> SimulatedData:
        """Draw a training set of ``n`` rows."""
        return self.generate()

    def get_test_data(self) -> SimulatedData:
        """Draw a test set of ``ntest`` rows.

        Raises:
            InvalidParameter: If ``ntest`` was not set.
        """
        if self._parameters.ntest is None:
            raise InvalidParameter("ntest was not set; pass ntest=... when creating the simulation")
        return self.generate(self._parameters.ntest)

    def spawn_generators(self, k: int) -> List[np.random.Generator]:
        """Spawn *k* independent child generators from the instance stream."""
        return list(self._rng.spawn(k))

    def simulate_many(
        self,
        n_replicates: int,
        n: Optional[int] = None,
        n_jobs: int = 1,
        progress_callback: Optional[Callable[[int, int], None]] = None,
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> List[SimulatedData]:
        """Draw independent replicate datasets.

        Each replicate uses its own child generator, so the output under
        a fixed seed is the same for any ``n_jobs``.

        Args:
            n_replicates: Number of datasets.
            n: Rows per dataset (defaults to the ``n`` parameter).
            n_jobs: Parallel workers (``1`` sequential, ``-1`` all cores).
            progress_callback: Optional ``callback(current, total)``, e.g.
                ``PrintReporter()`` or ``TqdmReporter()``.
            cancel_check: Optional callable returning ``True`` to abort.

        Returns:
            List of ``SimulatedData``.

        Raises:
            SimulationCancelled: If *cancel_check* fires.
        """
        _validate_count(n_replicates, "n_replicates").raise_if_invalid()
        if n is None:
            n = self._parameters.n
        _validate_count(n, "n").raise_if_invalid()
        workers, result = _validate_parallel_settings(n_jobs)
        result.raise_if_invalid()

        progress = ReplicateProgress(n_replicates, progress_callback) if progress_callback is not None else None
        runner = ReplicateRunner(n_jobs=workers)
        return runner.run(
            self._draw_func(int(n)),
            self.spawn_generators(n_replicates),
            progress=progress,
            cancel_check=cancel_check,
        )


# =============================================================================
# Entry points
# =============================================================================


def simulate(layout: str = "single", **config: Any) -> SimRel:
    """Build a simulation for the given response layout."""
    return SimRel(layout, **config)


def single_response(**config: Any) -> SimRel:
    """One response driven by one set of relevant predictors."""
    return SimRel("single", **config)


def paired_response(**config: Any) -> SimRel:
    """Two correlated responses, each driven by its own relevant block."""
    return SimRel("paired", **config)


def multi_response(**config: Any) -> SimRel:
    """Several responses driven by disjoint relevant blocks."""
    return SimRel("multi", **config)
