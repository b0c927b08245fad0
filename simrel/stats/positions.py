"""
Allocation of relevant predictor positions to response blocks.

Positions are 1-based component numbers. Each block's core positions
are extended with draws from the pool of positions not yet claimed by
any earlier block, so the resulting sets never overlap.
"""

from typing import List, Sequence, Tuple

import numpy as np

from ..exceptions import InvalidPosition


def _check_core_positions(p: int, relpos: Sequence[Sequence[int]]) -> None:
    """Raise ``InvalidPosition`` for out-of-range, repeated or shared core positions."""
    claimed = {}
    for block, positions in enumerate(relpos, start=1):
        seen = set()
        for pos in positions:
            if not 1 <= pos <= p:
                raise InvalidPosition(f"Relevant position {pos} (block {block}) is outside [1, {p}]")
            if pos in seen:
                raise InvalidPosition(f"Relevant position {pos} is repeated in block {block}")
            if pos in claimed:
                raise InvalidPosition(f"Relevant position {pos} is claimed by both block {claimed[pos]} and block {block}")
            seen.add(pos)
            claimed[pos] = block


def allocate_positions(
    p: int,
    q: Sequence[int],
    relpos: Sequence[Sequence[int]],
    rng: np.random.Generator,
) -> Tuple[Tuple[Tuple[int, ...], ...], Tuple[int, ...]]:
    """Extend each block's core positions to ``q[i]`` disjoint positions.

    Blocks are processed in declaration order. The pool starts as every
    position not named in any core set and shrinks as blocks claim
    positions, so later blocks never reuse earlier ones.

    Args:
        p: Number of predictors.
        q: Requested relevant-predictor count per block.
        relpos: Core (user-given) positions per block.
        rng: Random source; one ``choice`` draw per block.

    Returns:
        ``(relpred, irrelpred)``: the relevant positions per block (core
        positions first, then the sampled ones) and the sorted remaining
        irrelevant positions.

    Raises:
        InvalidPosition: If a core position is invalid or a block asks
            for more positions than the pool still holds.
    """
    _check_core_positions(p, relpos)

    core = {pos for positions in relpos for pos in positions}
    pool = np.array([pos for pos in range(1, p + 1) if pos not in core], dtype=int)

    relpred: List[Tuple[int, ...]] = []
    for block, (count, positions) in enumerate(zip(q, relpos), start=1):
        n_extra = count - len(positions)
        if n_extra < 0:
            raise InvalidPosition(f"Block {block} asks for q={count} positions but has {len(positions)} core positions")
        if n_extra > pool.size:
            raise InvalidPosition(
                f"Block {block} needs {n_extra} more relevant positions but only {pool.size} unclaimed positions remain"
            )
        extra = rng.choice(pool, size=n_extra, replace=False) if n_extra else np.empty(0, dtype=int)
        relpred.append(tuple(int(pos) for pos in positions) + tuple(int(pos) for pos in extra))
        pool = np.setdiff1d(pool, extra)

    return tuple(relpred), tuple(int(pos) for pos in pool)


def check_response_groups(ypos: Sequence[Sequence[int]], m: int) -> None:
    """Require *ypos* to partition the response components ``1..m``.

    Raises:
        InvalidPosition: If a component is out of range, repeated, or
            missing from every group.
    """
    seen = set()
    for group, positions in enumerate(ypos, start=1):
        if len(positions) == 0:
            raise InvalidPosition(f"Response group {group} in ypos is empty")
        for pos in positions:
            if not 1 <= pos <= m:
                raise InvalidPosition(f"Response position {pos} (group {group}) is outside [1, {m}]")
            if pos in seen:
                raise InvalidPosition(f"Response position {pos} appears in more than one ypos group")
            seen.add(pos)

    missing = sorted(set(range(1, m + 1)) - seen)
    if missing:
        raise InvalidPosition(f"ypos must cover every response component; missing {missing}")
