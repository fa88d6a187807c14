"""angmom: angular-momentum coupling, Clebsch-Gordan and Wigner symbols."""

from importlib.metadata import PackageNotFoundError, version as _dist_version

from angmom.angular import (
    MultiSpinState,
    analyze,
    clebsch_gordan,
    couple,
    create_coherent_state,
    create_eigenstate,
    create_lowering_operator,
    create_raising_operator,
    create_rotation_operator,
    create_total_j_squared_operator,
    create_x_operator,
    create_y_operator,
    create_z_operator,
    extract_component,
    wigner3j,
    wigner6j,
    wigner9j,
)
from angmom.config import AngmomConfig, config, get_config, set_config
from angmom.operators import MatrixOperator
from angmom.states import AngularMomentumMetadata, StateVector

# Full API lives in the subpackage (import as `from angmom import angular`)
from angmom import angular

try:
    __version__ = _dist_version("angmom")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    # Value types
    "AngularMomentumMetadata",
    "MatrixOperator",
    "MultiSpinState",
    "StateVector",
    # State / operator factory
    "create_eigenstate",
    "create_coherent_state",
    "create_raising_operator",
    "create_lowering_operator",
    "create_x_operator",
    "create_y_operator",
    "create_z_operator",
    "create_total_j_squared_operator",
    "create_rotation_operator",
    # Coupling
    "clebsch_gordan",
    "couple",
    "extract_component",
    "analyze",
    # Wigner symbols
    "wigner3j",
    "wigner6j",
    "wigner9j",
    # Config
    "AngmomConfig",
    "config",
    "get_config",
    "set_config",
    "angular",
]
