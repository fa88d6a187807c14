"""Tests for the StateVector value type and MatrixOperator."""

from __future__ import annotations

import numpy as np
import pytest

from angmom.operators import MatrixOperator
from angmom.states import AngularMomentumMetadata, StateVector


def test_state_vector_is_immutable_copy():
    src = np.array([1.0, 0.0], dtype=np.complex128)
    s = StateVector(src)
    src[0] = 5.0
    assert s.get(0) == 1.0
    with pytest.raises(ValueError):
        s.amplitudes[0] = 2.0


def test_set_returns_new_state():
    s = StateVector.zeros(3)
    t = s.set(1, 2.0 + 1.0j)
    assert s.get(1) == 0.0
    assert t.get(1) == 2.0 + 1.0j


def test_normalize_and_zero_norm():
    s = StateVector([3.0, 4.0j])
    n = s.normalize()
    assert abs(n.norm() - 1.0) < 1e-12
    with pytest.raises(ValueError):
        StateVector.zeros(2).normalize()


def test_normalize_keeps_metadata():
    meta = AngularMomentumMetadata.single(0.5)
    s = StateVector([2.0, 0.0], metadata=meta).normalize()
    assert s.metadata is meta


def test_tensor_product_ordering():
    a = StateVector([1.0, 2.0])
    b = StateVector([3.0, 4.0, 5.0])
    t = a.tensor(b)
    assert t.dimension == 6
    assert t.get(1 * 3 + 2) == 2.0 * 5.0


def test_inner_and_equals():
    a = StateVector([1.0, 1.0j]).normalize()
    assert abs(a.inner(a) - 1.0) < 1e-12
    assert a.equals(StateVector(a.amplitudes + 1e-12))
    assert not a.equals(StateVector([1.0, 0.0]))
    with pytest.raises(ValueError):
        a.inner(StateVector([1.0]))


def test_operator_apply_dimension_mismatch():
    op = MatrixOperator(np.eye(3))
    with pytest.raises(ValueError):
        op.apply(StateVector([1.0, 0.0]))


def test_operator_rejects_non_square():
    with pytest.raises(ValueError):
        MatrixOperator(np.zeros((2, 3)))


def test_compose_adjoint_and_expm():
    a = MatrixOperator([[0, 1], [0, 0]])
    b = a.adjoint()
    assert np.allclose(b.to_matrix(), [[0, 0], [1, 0]])
    assert np.allclose(a.compose(b).to_matrix(), [[1, 0], [0, 0]])
    # exp of a nilpotent matrix: I + A
    assert np.allclose(a.expm().to_matrix(), [[1, 1], [0, 1]])


def test_hermitian_and_expectation_value():
    sz = MatrixOperator(np.diag([0.5, -0.5]), "hermitian", j=0.5)
    assert sz.is_hermitian()
    up = StateVector([1.0, 0.0])
    assert abs(sz.expectation_value(up) - 0.5) < 1e-12
    assert sz.scale(2.0).j == 0.5


def test_scale_add_and_array_input():
    a = StateVector([1.0, 0.0], label="a")
    b = StateVector([0.0, 2.0])
    s = a.scale(2.0).add(b)
    np.testing.assert_allclose(s.to_array(), [2.0, 2.0])
    flip = MatrixOperator([[0, 1], [1, 0]])
    assert flip.apply([1.0, 0.0]).equals(StateVector([0.0, 1.0]))


def test_zero_state_checks():
    z = StateVector.zeros(3)
    assert z.is_zero()
    assert len(z) == 3
    assert not StateVector.basis(3, 2).is_zero()
    with pytest.raises(ValueError):
        StateVector.basis(3, 3)
    with pytest.raises(ValueError):
        StateVector([])
