"""
Simulation parameters and response layouts for SimRel.

Parameters are validated once and stored in a frozen record. The
response layout is an explicit tag; the shape of ``q``, ``relpos`` and
``R2`` must match it and is never used to guess it.
"""

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..exceptions import InvalidParameter, InvalidPosition
from ..stats.positions import check_response_groups
from ..utils.validators import (
    _validate_block_counts,
    _validate_count,
    _validate_decay,
    _validate_lambda_min,
    _validate_mean_vector,
    _validate_relevant_pool,
    _validate_seed,
    _ValidationResult,
)

LAYOUTS = ("single", "paired", "multi")

DEFAULT_PARAMETERS: Dict[str, Dict[str, Any]] = {
    "single": {
        "n": 100,
        "p": 20,
        "q": 10,
        "relpos": [1, 2, 3],
        "gamma": 0.8,
        "eta": 0.3,
        "R2": 0.9,
        "m": 1,
    },
    "paired": {
        "n": 100,
        "p": 20,
        "q": [5, 5],
        "relpos": [[1, 2], [3, 4]],
        "gamma": 0.8,
        "eta": 0.3,
        "R2": [0.8, 0.8],
        "m": 2,
    },
    "multi": {
        "n": 100,
        "p": 20,
        "q": [6, 7],
        "relpos": [[1, 2], [3, 4, 5]],
        "gamma": 0.8,
        "eta": 0.3,
        "R2": [0.7, 0.9],
        "m": 3,
    },
}

OPTIONAL_KEYS = ("ypos", "lambda_min", "ntest", "mu_x", "mu_y", "seed")
KNOWN_KEYS = frozenset(DEFAULT_PARAMETERS["single"]) | frozenset(OPTIONAL_KEYS)


@dataclass(frozen=True)
class SimulationParameters:
    """Validated, immutable inputs of one simulation.

    Per-block fields (``q``, ``relpos``, ``R2``) are always stored as
    tuples, one entry per response block, whatever the layout.
    ``relpos`` and ``ypos`` hold 1-based positions.
    """

    layout: str
    n: int
    p: int
    q: Tuple[int, ...]
    relpos: Tuple[Tuple[int, ...], ...]
    gamma: float
    eta: float
    R2: Tuple[float, ...]
    m: int
    ypos: Tuple[Tuple[int, ...], ...] = ()
    lambda_min: Optional[float] = None
    ntest: Optional[int] = None
    mu_x: Optional[Tuple[float, ...]] = None
    mu_y: Optional[Tuple[float, ...]] = None
    seed: Optional[int] = None

    @property
    def n_blocks(self) -> int:
        """Number of response blocks (informative latent response components)."""
        return len(self.q)

    def as_dict(self) -> Dict[str, Any]:
        """Parameters in user-facing form (scalars for the single layout)."""
        out = asdict(self)
        if self.layout == "single":
            out["q"] = self.q[0]
            out["relpos"] = list(self.relpos[0])
            out["R2"] = self.R2[0]
        return out


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (Sequence, np.ndarray)) and not isinstance(value, (str, bytes))


def _as_positions(value: Any, name: str) -> Tuple[int, ...]:
    """Flat sequence of integer positions."""
    if not _is_sequence(value) or any(_is_sequence(v) for v in value):
        raise InvalidParameter(f"{name} must be a flat sequence of integer positions, got {value!r}")
    out = []
    for v in value:
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)):
            raise InvalidParameter(f"{name} must contain integers, got {v!r}")
        out.append(int(v))
    return tuple(out)


def _as_position_groups(value: Any, name: str) -> Tuple[Tuple[int, ...], ...]:
    """Sequence of position sequences, one per block/group."""
    if not _is_sequence(value) or not all(_is_sequence(v) for v in value):
        raise InvalidParameter(f"{name} must be a sequence of position sequences (one per block), got {value!r}")
    return tuple(_as_positions(v, f"{name}[{i}]") for i, v in enumerate(value))


def _as_block_values(value: Any, name: str) -> Tuple[Any, ...]:
    """Per-block sequence of scalars (``q`` or ``R2``)."""
    if not _is_sequence(value) or any(_is_sequence(v) for v in value):
        raise InvalidParameter(f"{name} must be a sequence with one value per response block, got {value!r}")
    return tuple(value)


def _as_scalar(value: Any, name: str) -> Any:
    if _is_sequence(value):
        raise InvalidParameter(f"{name} must be a scalar for the single-response layout, got {value!r}")
    return value


def _default_ypos(layout: str, n_blocks: int, m: int) -> Tuple[Tuple[int, ...], ...]:
    """Response groups when ``ypos`` is not given.

    The paired layout rotates its two components together. Otherwise
    there is one group per block and the last group also takes the
    pure-noise components ``n_blocks + 1 .. m``.
    """
    if layout == "paired":
        return (tuple(range(1, m + 1)),)
    groups = [(i,) for i in range(1, n_blocks)]
    groups.append(tuple(range(n_blocks, m + 1)))
    return tuple(groups)


def build_parameters(layout: str, config: Optional[Mapping[str, Any]] = None) -> Tuple[SimulationParameters, List[str]]:
    """Merge *config* over the layout defaults and validate the result.

    Args:
        layout: ``"single"``, ``"paired"`` or ``"multi"``.
        config: User options; unknown keys are rejected.

    Returns:
        ``(parameters, warnings)``; the caller decides how to surface
        the warnings.

    Raises:
        InvalidParameter: On any invalid or inconsistent option.
        InvalidPosition: If ``ypos`` does not partition ``1..m``, or the
            relevant counts do not fit into ``p`` positions.
    """
    if layout not in LAYOUTS:
        raise InvalidParameter(f"layout must be one of {LAYOUTS}, got {layout!r}")

    config = dict(config or {})
    unknown = sorted(set(config) - KNOWN_KEYS)
    if unknown:
        raise InvalidParameter(f"Unknown simulation option(s): {', '.join(unknown)}. Recognised: {', '.join(sorted(KNOWN_KEYS))}")

    merged: Dict[str, Any] = {**DEFAULT_PARAMETERS[layout], **config}

    result = _ValidationResult(True, [], [])
    for key in ("n", "p", "m"):
        result = result.merge(_validate_count(merged[key], key))
    if merged.get("ntest") is not None:
        result = result.merge(_validate_count(merged["ntest"], "ntest"))
    result = result.merge(_validate_decay(merged["gamma"], "gamma"))
    result = result.merge(_validate_decay(merged["eta"], "eta"))
    result = result.merge(_validate_lambda_min(merged.get("lambda_min")))
    result = result.merge(_validate_seed(merged.get("seed")))
    result.raise_if_invalid()

    p, m = int(merged["p"]), int(merged["m"])

    if layout == "single":
        q = (_as_scalar(merged["q"], "q"),)
        relpos: Tuple[Tuple[int, ...], ...] = (_as_positions(merged["relpos"], "relpos"),)
        r2 = (_as_scalar(merged["R2"], "R2"),)
        if m != 1:
            raise InvalidParameter(f"The single-response layout requires m = 1, got m = {m}")
        if merged.get("ypos") is not None:
            raise InvalidParameter("ypos only applies to layouts with more than one response")
        ypos: Tuple[Tuple[int, ...], ...] = ()
    else:
        q = _as_block_values(merged["q"], "q")
        relpos = _as_position_groups(merged["relpos"], "relpos")
        r2 = _as_block_values(merged["R2"], "R2")
        if layout == "paired" and (len(q) != 2 or m != 2):
            raise InvalidParameter(f"The paired layout requires exactly 2 response blocks and m = 2, got {len(q)} blocks and m = {m}")
        if len(q) > m:
            raise InvalidParameter(f"Number of response blocks ({len(q)}) exceeds the response dimension m = {m}")
        if merged.get("ypos") is None:
            ypos = _default_ypos(layout, len(q), m)
        else:
            ypos = _as_position_groups(merged["ypos"], "ypos")
        check_response_groups(ypos, m)

    counts = _validate_block_counts(q, relpos, r2)
    mu_x, mu_x_result = _validate_mean_vector(merged.get("mu_x"), p, "mu_x")
    mu_y, mu_y_result = _validate_mean_vector(merged.get("mu_y"), m, "mu_y")
    result = counts.merge(mu_x_result).merge(mu_y_result)
    result.raise_if_invalid()
    _validate_relevant_pool(q, p).raise_if_invalid(InvalidPosition)

    params = SimulationParameters(
        layout=layout,
        n=int(merged["n"]),
        p=p,
        q=tuple(int(v) for v in q),
        relpos=relpos,
        gamma=float(merged["gamma"]),
        eta=float(merged["eta"]),
        R2=tuple(float(v) for v in r2),
        m=m,
        ypos=ypos,
        lambda_min=None if merged.get("lambda_min") is None else float(merged["lambda_min"]),
        ntest=None if merged.get("ntest") is None else int(merged["ntest"]),
        mu_x=None if mu_x is None else tuple(float(v) for v in mu_x),
        mu_y=None if mu_y is None else tuple(float(v) for v in mu_y),
        seed=None if merged.get("seed") is None else int(merged["seed"]),
    )
    return params, result.warnings
