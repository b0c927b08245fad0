"""
Tests for relevant-position allocation and response groups.
"""

import numpy as np
import pytest

from simrel.exceptions import InvalidParameter, InvalidPosition
from simrel.stats.positions import allocate_positions, check_response_groups


class TestAllocatePositions:
    """Test allocate_positions function."""

    def test_single_block_superset_of_core(self, rng):
        relpred, irrelpred = allocate_positions(20, [10], [(1, 2, 3)], rng)
        assert len(relpred) == 1
        assert relpred[0][:3] == (1, 2, 3)
        assert len(relpred[0]) == 10
        assert len(set(relpred[0])) == 10

    def test_irrelevant_is_complement(self, rng):
        relpred, irrelpred = allocate_positions(20, [10], [(1, 2, 3)], rng)
        assert set(relpred[0]) | set(irrelpred) == set(range(1, 21))
        assert not set(relpred[0]) & set(irrelpred)
        assert list(irrelpred) == sorted(irrelpred)

    def test_blocks_disjoint(self, rng):
        relpred, irrelpred = allocate_positions(30, [6, 7, 5], [(1, 2), (3, 4, 5), (6,)], rng)
        sets = [set(block) for block in relpred]
        for i in range(len(sets)):
            for j in range(i + 1, len(sets)):
                assert not sets[i] & sets[j]
        assert [len(s) for s in sets] == [6, 7, 5]

    def test_each_block_keeps_core(self, rng):
        core = [(1, 2), (3, 4, 5)]
        relpred, _ = allocate_positions(20, [6, 7], core, rng)
        for block, positions in zip(relpred, core):
            assert set(positions) <= set(block)

    def test_later_blocks_cannot_take_other_core_positions(self):
        for seed in range(20):
            relpred, _ = allocate_positions(8, [4, 2], [(1,), (2, 3)], np.random.default_rng(seed))
            assert not {2, 3} & set(relpred[0])

    def test_exact_fill(self, rng):
        relpred, irrelpred = allocate_positions(6, [3, 3], [(1,), (2,)], rng)
        assert irrelpred == ()
        assert set(relpred[0]) | set(relpred[1]) == set(range(1, 7))

    def test_q_equals_core_draws_nothing(self, rng):
        state = rng.bit_generator.state
        relpred, _ = allocate_positions(10, [3], [(4, 5, 6)], rng)
        assert relpred == ((4, 5, 6),)
        assert rng.bit_generator.state == state

    def test_reproducible(self):
        a = allocate_positions(40, [10, 10], [(1,), (2,)], np.random.default_rng(5))
        b = allocate_positions(40, [10, 10], [(1,), (2,)], np.random.default_rng(5))
        assert a == b

    def test_out_of_range_position(self, rng):
        with pytest.raises(InvalidPosition, match="outside"):
            allocate_positions(10, [3], [(0, 1, 2)], rng)
        with pytest.raises(InvalidPosition, match="outside"):
            allocate_positions(10, [3], [(1, 2, 11)], rng)

    def test_repeated_position(self, rng):
        with pytest.raises(InvalidPosition, match="repeated"):
            allocate_positions(10, [3], [(1, 1)], rng)

    def test_overlapping_core_positions(self, rng):
        with pytest.raises(InvalidPosition, match="both block"):
            allocate_positions(10, [3, 3], [(1, 2), (2, 3)], rng)

    def test_pool_exhausted(self, rng):
        with pytest.raises(InvalidPosition, match="unclaimed"):
            allocate_positions(6, [4, 4], [(1,), (2,)], rng)

    def test_invalid_position_is_invalid_parameter(self):
        assert issubclass(InvalidPosition, InvalidParameter)


class TestCheckResponseGroups:
    """Test check_response_groups function."""

    def test_valid_partition(self):
        check_response_groups([(1,), (2, 3)], 3)
        check_response_groups([(1, 2)], 2)

    def test_missing_component(self):
        with pytest.raises(InvalidPosition, match="missing"):
            check_response_groups([(1,), (2,)], 3)

    def test_repeated_component(self):
        with pytest.raises(InvalidPosition, match="more than one"):
            check_response_groups([(1, 2), (2, 3)], 3)

    def test_out_of_range(self):
        with pytest.raises(InvalidPosition, match="outside"):
            check_response_groups([(1, 4)], 3)

    def test_empty_group(self):
        with pytest.raises(InvalidPosition, match="empty"):
            check_response_groups([(), (1, 2)], 2)
