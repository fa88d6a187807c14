"""Angular-momentum algebra: eigenstates, operators, CG coupling, Wigner symbols."""

from angmom.angular.analysis import (
    AngularStateAnalysis,
    ExtractedComponent,
    JComponentInfo,
    analysis_to_string,
    analyze,
    extract_component,
    extract_component_details,
    get_coupling_info,
    has_angular_momentum_data,
)
from angmom.angular.clebsch import (
    ClebschGordanCache,
    cg_table,
    clebsch_gordan,
    get_cg_cache,
    is_zero_cg,
    validate_coupling_numbers,
)
from angmom.angular.composition import block_layout, couple, decompose_to_uncoupled
from angmom.angular.core import (
    angular_to_computational_basis,
    basis_index,
    computational_to_angular_basis,
    create_coherent_state,
    create_eigenstate,
    create_lowering_operator,
    create_raising_operator,
    create_rotation_operator,
    create_total_j_squared_from_components,
    create_total_j_squared_operator,
    create_x_operator,
    create_y_operator,
    create_z_operator,
    identify_basis,
    is_valid_m,
    jm_expectation_value,
    valid_m_values,
    validate_j,
)
from angmom.angular.multispin import CouplingStep, MultiSpinState
from angmom.angular.wigner import (
    Wigner3jSymmetry,
    is_valid_triangle,
    wigner3j,
    wigner3j_symmetry,
    wigner6j,
    wigner9j,
)

__all__ = [
    "AngularStateAnalysis",
    "ClebschGordanCache",
    "CouplingStep",
    "ExtractedComponent",
    "JComponentInfo",
    "MultiSpinState",
    "Wigner3jSymmetry",
    "analysis_to_string",
    "analyze",
    "angular_to_computational_basis",
    "basis_index",
    "block_layout",
    "cg_table",
    "clebsch_gordan",
    "computational_to_angular_basis",
    "couple",
    "create_coherent_state",
    "create_eigenstate",
    "create_lowering_operator",
    "create_raising_operator",
    "create_rotation_operator",
    "create_total_j_squared_from_components",
    "create_total_j_squared_operator",
    "create_x_operator",
    "create_y_operator",
    "create_z_operator",
    "decompose_to_uncoupled",
    "extract_component",
    "extract_component_details",
    "get_cg_cache",
    "get_coupling_info",
    "has_angular_momentum_data",
    "identify_basis",
    "is_valid_m",
    "is_valid_triangle",
    "is_zero_cg",
    "jm_expectation_value",
    "valid_m_values",
    "validate_coupling_numbers",
    "validate_j",
    "wigner3j",
    "wigner3j_symmetry",
    "wigner6j",
    "wigner9j",
]
