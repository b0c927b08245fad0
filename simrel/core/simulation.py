"""
Replicate execution for SimRel.

Draws many independent datasets from one frozen simulation, e.g. to
benchmark a regression method over repeated training sets. Each
replicate gets its own child generator, so results do not depend on
whether the draws run sequentially or in parallel.
"""

import warnings
from typing import Callable, List, Optional

import numpy as np

from ..progress import SimulationCancelled
from ..stats.data_generation import SimulatedData


class ReplicateRunner:
    """Executes replicate draws, optionally in parallel with joblib.

    Args:
        n_jobs: Worker count. ``1`` runs sequentially in-process; larger
            values (or ``-1`` for all cores) use joblib's ``loky``
            backend when joblib is installed.
    """

    def __init__(self, n_jobs: int = 1):
        self.n_jobs = n_jobs

    def run(
        self,
        draw_func: Callable[..., SimulatedData],
        generators: List[np.random.Generator],
        progress=None,
        cancel_check: Optional[Callable[[], bool]] = None,
    ) -> List[SimulatedData]:
        """Call ``draw_func(rng=g)`` once per generator.

        Args:
            draw_func: Picklable callable accepting an ``rng`` keyword.
            generators: One independent generator per replicate.
            progress: Optional ``ReplicateProgress``, told about each finished replicate.
            cancel_check: Optional callable returning ``True`` to abort.

        Returns:
            Replicates in generator order.

        Raises:
            SimulationCancelled: If *cancel_check* fires.
        """
        if self.n_jobs != 1:
            try:
                from joblib import Parallel, delayed
            except ImportError:
                warnings.warn(
                    "joblib not available (pip install SimRel[parallel]); drawing replicates sequentially",
                    UserWarning,
                    stacklevel=2,
                )
            else:
                if progress is not None:
                    progress.begin()
                draws = Parallel(
                    n_jobs=self.n_jobs,
                    backend="loky",
                    verbose=0,
                    return_as="generator",
                )(delayed(draw_func)(rng=g) for g in generators)
                results = []
                for data in draws:
                    if cancel_check is not None and cancel_check():
                        raise SimulationCancelled("Simulation cancelled by user")
                    results.append(data)
                    if progress is not None:
                        progress.completed()
                if progress is not None:
                    progress.end()
                return results

        if progress is not None:
            progress.begin()
        results = []
        for g in generators:
            if cancel_check is not None and cancel_check():
                raise SimulationCancelled("Simulation cancelled by user")
            results.append(draw_func(rng=g))
            if progress is not None:
                progress.completed()
        if progress is not None:
            progress.end()
        return results
