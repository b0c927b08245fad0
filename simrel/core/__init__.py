"""Core components for the SimRel framework.

Re-exports the construction pipeline:

- ``SimulationParameters``, ``build_parameters``, ``DEFAULT_PARAMETERS``,
  ``LAYOUTS``: validated inputs and per-layout defaults.
- ``SimulationProperties``, ``build_properties``: frozen derived
  quantities (covariance, rotations, true coefficients).
- ``ReplicateRunner``: repeated independent draws.
"""

from .parameters import DEFAULT_PARAMETERS, LAYOUTS, SimulationParameters, build_parameters
from .properties import SimulationProperties, build_properties
from .simulation import ReplicateRunner

__all__ = [
    # Parameters
    "SimulationParameters",
    "build_parameters",
    "DEFAULT_PARAMETERS",
    "LAYOUTS",
    # Properties
    "SimulationProperties",
    "build_properties",
    # Replicates
    "ReplicateRunner",
]
