"""Basis-index convention shared by eigenstates, ladder operators and basis_index."""

from __future__ import annotations

import math

import numpy as np
import pytest

from angmom.angular import (
    basis_index,
    create_eigenstate,
    create_lowering_operator,
    create_raising_operator,
    valid_m_values,
)

J_VALUES = [0, 0.5, 1, 1.5, 2, 2.5, 3]
JM_GRID = [(j, m) for j in J_VALUES for m in valid_m_values(j)]


@pytest.mark.parametrize(
    "j,m,index",
    [(0.5, 0.5, 0), (0.5, -0.5, 1), (1, 1, 0), (1, 0, 1), (1, -1, 2), (0, 0, 0)],
)
def test_known_index_mappings(j, m, index):
    assert basis_index(j, m) == index
    s = create_eigenstate(j, m)
    assert int(np.argmax(np.abs(s.amplitudes))) == index


@pytest.mark.parametrize("j,m", JM_GRID)
def test_eigenstate_is_normalized_unit_vector(j, m):
    s = create_eigenstate(j, m)
    assert s.dimension == int(round(2 * j)) + 1
    assert abs(s.norm() - 1.0) < 1e-12
    expected = np.zeros(s.dimension)
    expected[basis_index(j, m)] = 1.0
    np.testing.assert_allclose(s.amplitudes, expected)


@pytest.mark.parametrize("j", J_VALUES)
def test_lowering_annihilates_bottom_state(j):
    out = create_lowering_operator(j).apply(create_eigenstate(j, -j))
    assert out.norm() < 1e-12


@pytest.mark.parametrize("j,m", JM_GRID)
def test_raising_matrix_element(j, m):
    """J+|j,m> = sqrt(j(j+1) - m(m+1)) |j,m+1>."""

    out = create_raising_operator(j).apply(create_eigenstate(j, m))
    coeff = math.sqrt(j * (j + 1.0) - m * (m + 1.0))
    assert abs(out.norm() - coeff) < 1e-12
    if m < j:
        assert abs(out.get(basis_index(j, m + 1)) - coeff) < 1e-12


@pytest.mark.parametrize("j,m", JM_GRID)
def test_lowering_matrix_element(j, m):
    """J-|j,m> = sqrt(j(j+1) - m(m-1)) |j,m-1>."""

    out = create_lowering_operator(j).apply(create_eigenstate(j, m))
    coeff = math.sqrt(j * (j + 1.0) - m * (m - 1.0))
    assert abs(out.norm() - coeff) < 1e-12
    if m > -j:
        assert abs(out.get(basis_index(j, m - 1)) - coeff) < 1e-12
