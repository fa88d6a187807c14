"""J-component analysis and extraction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from angmom.angular import (
    analysis_to_string,
    analyze,
    couple,
    create_eigenstate,
    extract_component,
    extract_component_details,
    get_coupling_info,
    has_angular_momentum_data,
)
from angmom.states import StateVector

UP = create_eigenstate(0.5, 0.5)
DOWN = create_eigenstate(0.5, -0.5)


def _mixed():
    """|up>(|up>+|down>)/sqrt2: J=1 weight 3/4, J=0 weight 1/4."""

    tilted = StateVector([1.0, 1.0]).normalize().with_metadata(UP.metadata)
    return couple(UP, 0.5, tilted, 0.5)


def test_analyze_mixed_state():
    a = analyze(_mixed())
    assert a.is_angular_momentum
    assert not a.is_pure
    assert a.dominant_j == 1.0
    assert a.present_j == [1.0, 0.0]
    assert abs(a.components[1.0].magnitude - math.sqrt(3.0) / 2.0) < 1e-12
    assert abs(a.components[0.0].magnitude - 0.5) < 1e-12
    assert a.components[1.0].dimension == 3
    assert list(a.components[1.0].m_amplitudes) == [1.0, 0.0, -1.0]
    assert a.coupling_info == (0.5, 0.5)


def test_analyze_pure_and_single_states():
    a = analyze(couple(UP, 0.5, UP, 0.5))
    assert a.is_pure
    assert a.dominant_j == 1.0

    single = analyze(create_eigenstate(1.5, 0.5))
    assert single.is_pure
    assert single.dominant_j == 1.5
    assert single.coupling_info is None


def test_analyze_without_metadata():
    raw = StateVector(_mixed().amplitudes)
    assert not analyze(raw).is_angular_momentum
    a = analyze(raw, 0.5, 0.5)
    assert a.is_angular_momentum
    assert a.dominant_j == 1.0
    assert a.coupling_info == (0.5, 0.5)


def test_extract_components():
    s = _mixed()
    triplet = extract_component(s, 1)
    assert triplet.dimension == 3
    np.testing.assert_allclose(
        triplet.amplitudes, [math.sqrt(2.0 / 3.0), math.sqrt(1.0 / 3.0), 0.0], atol=1e-12
    )
    assert abs(triplet.norm() - 1.0) < 1e-12
    assert triplet.metadata.present_j == [1.0]
    assert not triplet.metadata.is_composite

    details = extract_component_details(s, 0)
    assert details.state.dimension == 1
    assert abs(details.original_magnitude - 0.5) < 1e-12
    assert abs(details.normalization_factor - 2.0) < 1e-12
    assert abs(details.state.norm() - 1.0) < 1e-12


def test_extract_absent_component_returns_none():
    s = couple(UP, 0.5, UP, 0.5)
    assert extract_component(s, 0) is None
    assert extract_component(s, 3) is None


def test_extract_without_metadata():
    raw = StateVector(couple(UP, 0.5, DOWN, 0.5).amplitudes)
    singlet = extract_component(raw, 0, 0.5, 0.5)
    assert singlet.dimension == 1
    assert abs(abs(singlet.get(0)) - 1.0) < 1e-12
    with pytest.raises(ValueError):
        extract_component(raw, 0)
    with pytest.raises(ValueError):
        extract_component(raw, 0, 1, 0.5)


def test_coupling_info_helpers():
    s = _mixed()
    assert has_angular_momentum_data(s)
    assert not has_angular_momentum_data(StateVector([1.0]))
    assert get_coupling_info(s) == (0.5, 0.5)
    assert get_coupling_info(UP) is None
    assert get_coupling_info(StateVector([1.0])) is None


def test_analysis_to_string():
    text = analysis_to_string(analyze(_mixed()))
    assert "Mixed" in text
    assert "Dominant J: 1.0" in text
    assert "J=0.0" in text
    assert analysis_to_string(analyze(StateVector([1.0, 0.0]))) == "Not an angular momentum state"


def test_analyze_rejects_wrong_dimension():
    """A state sized for another (j1, j2) pair is an error, not a padded guess."""

    with pytest.raises(ValueError):
        analyze(StateVector([0.0, 0.0, 1.0]), 0.5, 0.5)
    with pytest.raises(ValueError):
        analyze(StateVector(np.ones(5)), 0.5, 0.5)
    with pytest.raises(ValueError):
        extract_component(StateVector([0.0, 0.0, 1.0]), 1, 0.5, 0.5)


def test_analyze_rejects_metadata_larger_than_state():
    bogus = StateVector([1.0, 0.0]).with_metadata(create_eigenstate(1, 0).metadata)
    with pytest.raises(ValueError):
        analyze(bogus)
