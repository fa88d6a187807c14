"""Clebsch-Gordan values (Condon-Shortley), selection rules and table caching."""

from __future__ import annotations

import math

import pytest

from angmom.angular import (
    ClebschGordanCache,
    cg_table,
    clebsch_gordan,
    is_zero_cg,
    validate_coupling_numbers,
)
from angmom.config import config


@pytest.mark.parametrize(
    "args,expected",
    [
        ((0.5, 0.5, 0.5, -0.5, 0, 0), 1.0 / math.sqrt(2.0)),
        ((0.5, -0.5, 0.5, 0.5, 0, 0), -1.0 / math.sqrt(2.0)),
        ((0.5, 0.5, 0.5, -0.5, 1, 0), 1.0 / math.sqrt(2.0)),
        ((0.5, 0.5, 0.5, 0.5, 1, 1), 1.0),
        ((1, 1, 0.5, -0.5, 1.5, 0.5), 1.0 / math.sqrt(3.0)),
        ((1, 0, 0.5, 0.5, 1.5, 0.5), math.sqrt(2.0 / 3.0)),
        ((1, 0, 0.5, 0.5, 0.5, 0.5), -1.0 / math.sqrt(3.0)),
        ((1, 0, 1, 0, 2, 0), math.sqrt(2.0 / 3.0)),
        ((1, 0, 1, 0, 0, 0), -1.0 / math.sqrt(3.0)),
        ((1, 1, 1, -1, 0, 0), 1.0 / math.sqrt(3.0)),
    ],
)
def test_known_values(args, expected):
    assert abs(clebsch_gordan(*args) - expected) < 1e-12


@pytest.mark.parametrize(
    "args",
    [
        (0.5, 0.5, 0.5, 0.5, 1, 0),  # m != m1 + m2
        (1, 0, 1, 0, 3, 0),  # j out of triangle
        (0.5, 1.5, 0.5, -0.5, 1, 1),  # |m1| > j1
        (1, 0, 0.5, 0.5, 1, 0.5),  # j1+j2+j not an integer
        (0.3, 0, 1, 0, 1, 0),  # not a half-integer
    ],
)
def test_zero_by_convention(args):
    assert clebsch_gordan(*args) == 0.0
    assert is_zero_cg(*args)


def test_validate_coupling_numbers_raises():
    validate_coupling_numbers(1, 0, 0.5, 0.5, 1.5, 0.5)
    with pytest.raises(ValueError):
        validate_coupling_numbers(1, 0, 1, 0, 3, 0)
    with pytest.raises(ValueError):
        validate_coupling_numbers(0.5, 0.5, 0.5, 0.5, 1, 0)
    with pytest.raises(ValueError):
        validate_coupling_numbers(1, 2, 1, 0, 2, 2)


@pytest.mark.parametrize("j1,j2", [(0.5, 0.5), (1, 0.5), (1, 1), (1.5, 1), (2, 1.5)])
def test_orthonormality(j1, j2):
    """Sum over m1 of C(J,M)C(J',M) = delta(J,J'); completeness over J for fixed m1, m2."""

    js = [abs(j1 - j2) + k for k in range(int(round(j1 + j2 - abs(j1 - j2))) + 1)]
    m1s = [j1 - k for k in range(int(round(2 * j1)) + 1)]
    m2s = [j2 - k for k in range(int(round(2 * j2)) + 1)]

    for ja in js:
        for jb in js:
            for m in [ja - k for k in range(int(round(2 * ja)) + 1)]:
                s = sum(
                    clebsch_gordan(j1, m1, j2, m - m1, ja, m) * clebsch_gordan(j1, m1, j2, m - m1, jb, m)
                    for m1 in m1s
                )
                assert abs(s - (1.0 if ja == jb else 0.0)) < 1e-12

    for m1 in m1s:
        for m2 in m2s:
            s = sum(clebsch_gordan(j1, m1, j2, m2, j, m1 + m2) ** 2 for j in js)
            assert abs(s - 1.0) < 1e-12


def test_exchange_symmetry():
    """<j1 m1; j2 m2|J M> = (-1)^(j1+j2-J) <j2 m2; j1 m1|J M>."""

    for j in (1.5, 2.5):
        a = clebsch_gordan(2, 1, 0.5, -0.5, j, 0.5)
        b = clebsch_gordan(0.5, -0.5, 2, 1, j, 0.5)
        phase = (-1.0) ** int(round(2 + 0.5 - j))
        assert a != 0.0
        assert abs(a - phase * b) < 1e-12

    # vanishes without being forbidden by a selection rule
    assert abs(clebsch_gordan(1, 0, 1, 0, 1, 0)) < 1e-12


def test_cg_table_keys_are_floats():
    tab = cg_table(0.5, 0.5)
    assert abs(tab[(0.5, -0.5, 0.0, 0.0)] - 1.0 / math.sqrt(2.0)) < 1e-12
    assert (0.5, 0.5, 0.0, 1.0) not in tab
    # six non-zero entries: |1,+-1>, two each for |1,0> and |0,0>
    assert len(tab) == 6


def test_cache_builds_each_pair_once():
    cache = ClebschGordanCache()
    assert len(cache) == 0
    clebsch_gordan(1, 0, 0.5, 0.5, 1.5, 0.5, cache=cache)
    assert (2, 1) in cache
    first = cache.table_twos(2, 1)
    clebsch_gordan(1, 1, 0.5, -0.5, 0.5, 0.5, cache=cache)
    assert cache.table_twos(2, 1) is first
    assert cache.keys() == [(2, 1)]
    cache.clear()
    assert len(cache) == 0


def test_cached_tables_are_read_only():
    cache = ClebschGordanCache()
    tab = cache.table(0.5, 0.5)
    with pytest.raises(TypeError):
        tab[(1, 1, 2, 2)] = 0.0  # type: ignore[index]


def test_uncached_lookup_matches_cached():
    ref = clebsch_gordan(2, 1, 1, -1, 2, 0)
    with config(use_cg_cache=False):
        assert clebsch_gordan(2, 1, 1, -1, 2, 0) == ref


def test_process_cache_is_shared():
    from angmom.angular import get_cg_cache

    cache = get_cg_cache()
    assert isinstance(cache, ClebschGordanCache)
    clebsch_gordan(1.5, 0.5, 1, 0, 1.5, 0.5)
    assert (3, 2) in cache
