"""Numerical building blocks: spectra, positions, rotations, covariance, derivation and sampling."""

from . import covariance as covariance
from . import data_generation as data_generation
from . import derivation as derivation
from . import eigen as eigen
from . import positions as positions
from . import rotation as rotation
