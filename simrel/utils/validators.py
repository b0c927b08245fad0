"""
Validation utilities for SimRel.

This module provides validation functions for simulation parameters:
counts, decay rates, coefficients of determination, mean vectors,
seeds and parallel settings.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Type, Union

import numpy as np

from ..exceptions import InvalidParameter

__all__ = []

_INT_TYPES = (int, np.integer)
_REAL_TYPES = (int, float, np.integer, np.floating)

# Residual variance below this triggers a warning (not an error)
R2_WARNING_MARGIN = 1e-8


@dataclass
class _ValidationResult:
    """Outcome of a validation check, carrying errors and warnings.

    Attributes:
        is_valid: ``True`` if no errors were found.
        errors: List of error messages (empty when valid).
        warnings: List of non-fatal warning messages.
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_invalid(self, error_cls: Type[InvalidParameter] = InvalidParameter):
        """Raise *error_cls* (``InvalidParameter`` by default) if the validation failed."""
        if not self.is_valid:
            error_msg = "Validation failed:\n" + "\n".join(f"• {err}" for err in self.errors)
            raise error_cls(error_msg)

    def merge(self, other: "_ValidationResult") -> "_ValidationResult":
        """Combine two results into one."""
        errors = self.errors + other.errors
        return _ValidationResult(len(errors) == 0, errors, self.warnings + other.warnings)


class _Validator:
    """Static helpers for type and range checks used by all validators."""

    @staticmethod
    def _check_type(value: Any, expected_types: tuple, name: str) -> Optional[str]:
        """Check if value has expected type (``bool`` never counts as a number)."""
        if isinstance(value, bool) or not isinstance(value, expected_types):
            return f"{name} must be {'an integer' if expected_types is _INT_TYPES else 'a real number'}, got {type(value).__name__}"
        return None

    @staticmethod
    def _check_range(
        value: Union[int, float],
        min_val: Optional[float],
        max_val: Optional[float],
        name: str,
    ) -> Optional[str]:
        """Check if value is within range."""
        if min_val is not None and value < min_val:
            return f"{name} must be >= {min_val}, got {value}"
        if max_val is not None and value > max_val:
            return f"{name} must be <= {max_val}, got {value}"
        return None


_validator = _Validator()


def _validate_numeric_parameter(
    value: Any,
    name: str,
    expected_types: tuple = _REAL_TYPES,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> _ValidationResult:
    """Generic validation for numeric parameters."""
    errors: List[str] = []

    type_error = _validator._check_type(value, expected_types, name)
    if type_error:
        errors.append(type_error)
        return _ValidationResult(False, errors, [])

    if not np.isfinite(value):
        errors.append(f"{name} must be finite, got {value}")
        return _ValidationResult(False, errors, [])

    range_error = _validator._check_range(value, min_val, max_val, name)
    if range_error:
        errors.append(range_error)

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_count(value: Any, name: str, min_val: int = 1) -> _ValidationResult:
    """Validate an integer count such as ``n``, ``p`` or ``m``."""
    return _validate_numeric_parameter(value, name, expected_types=_INT_TYPES, min_val=min_val)


def _validate_decay(value: Any, name: str) -> _ValidationResult:
    """Validate an eigenvalue decay rate (non-negative real)."""
    return _validate_numeric_parameter(value, name, min_val=0)


def _validate_r2(value: Any, name: str = "R2") -> _ValidationResult:
    """Validate a coefficient of determination, strictly inside (0, 1)."""
    result = _validate_numeric_parameter(value, name)
    if not result.is_valid:
        return result

    if not 0 < value < 1:
        result.errors.append(f"{name} must be strictly between 0 and 1, got {value}")
        result.is_valid = False
    elif 1 - value < R2_WARNING_MARGIN:
        result.warnings.append(
            f"{name}={value} leaves a residual variance below {R2_WARNING_MARGIN:g}; "
            "the latent covariance may be numerically singular"
        )
    return result


def _validate_lambda_min(value: Any) -> _ValidationResult:
    """Validate the optional eigenvalue floor."""
    if value is None:
        return _ValidationResult(True, [], [])
    result = _validate_numeric_parameter(value, "lambda_min", min_val=0)
    if result.is_valid and value > 1:
        result.errors.append(f"lambda_min must be <= 1 (the largest eigenvalue), got {value}")
        result.is_valid = False
    return result


def _validate_block_counts(
    q: Sequence[int],
    relpos: Sequence[Sequence[int]],
    r2: Sequence[float],
) -> _ValidationResult:
    """Validate per-block relevant counts against their core positions.

    Requires one ``q``, one ``relpos`` and one ``R2`` per block, with
    ``len(relpos[i]) <= q[i]``. Whether the counts fit into ``p``
    predictors is checked separately by ``_validate_relevant_pool``.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not (len(q) == len(relpos) == len(r2)):
        errors.append(f"q, relpos and R2 must have one entry per response block, got lengths {len(q)}, {len(relpos)} and {len(r2)}")
        return _ValidationResult(False, errors, warnings)

    for i, (count, positions, rsq) in enumerate(zip(q, relpos, r2), start=1):
        suffix = f" (block {i})" if len(q) > 1 else ""
        count_result = _validate_count(count, f"q{suffix}")
        rsq_result = _validate_r2(rsq, f"R2{suffix}")
        errors.extend(count_result.errors + rsq_result.errors)
        warnings.extend(rsq_result.warnings)
        if not count_result.is_valid:
            continue
        if len(positions) == 0:
            errors.append(f"relpos{suffix} must contain at least one position")
        if count < len(positions):
            errors.append(f"q{suffix} = {count} is smaller than its {len(positions)} core relevant positions")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_relevant_pool(q: Sequence[int], p: int) -> _ValidationResult:
    """Validate that the relevant counts fit into ``p`` predictor positions.

    Failures here mean the position pool would run out, so callers raise
    them as ``InvalidPosition``.
    """
    errors: List[str] = []
    for i, count in enumerate(q, start=1):
        if count > p:
            suffix = f" (block {i})" if len(q) > 1 else ""
            errors.append(f"q{suffix} = {count} exceeds the number of predictors p = {p}")

    if not errors and sum(q) > p:
        errors.append(f"Total relevant predictors sum(q) = {sum(q)} exceeds p = {p}")

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_mean_vector(mu: Any, length: int, name: str) -> Tuple[Optional[np.ndarray], _ValidationResult]:
    """Validate an optional additive mean shift of a given length."""
    if mu is None:
        return None, _ValidationResult(True, [], [])

    try:
        arr = np.asarray(mu, dtype=float).reshape(-1)
    except (TypeError, ValueError):
        return None, _ValidationResult(False, [f"{name} must be a sequence of real numbers, got {mu!r}"], [])

    errors = []
    if arr.size != length:
        errors.append(f"{name} must have length {length}, got {arr.size}")
    elif not np.all(np.isfinite(arr)):
        errors.append(f"{name} must contain only finite values")
    return arr, _ValidationResult(len(errors) == 0, errors, [])


def _validate_seed(seed: Any) -> _ValidationResult:
    """Validate random seed (non-negative integer or ``None``)."""
    if seed is None:
        return _ValidationResult(True, [], [])
    return _validate_numeric_parameter(seed, "seed", expected_types=_INT_TYPES, min_val=0)


def _validate_parallel_settings(n_jobs: Any) -> Tuple[int, _ValidationResult]:
    """Validate number of parallel jobs for replicate runs.

    Args:
        n_jobs: Positive integer, or ``-1`` for all cores.

    Returns:
        (n_jobs, ValidationResult)
    """
    import multiprocessing as mp

    errors = []
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, _INT_TYPES) or (n_jobs <= 0 and n_jobs != -1):
        errors.append(f"n_jobs must be a positive integer or -1, got {n_jobs!r}")
        return 1, _ValidationResult(False, errors, [])

    max_cores = mp.cpu_count()
    validated = max_cores if n_jobs == -1 else min(int(n_jobs), max_cores)
    return validated, _ValidationResult(True, [], [])
