from angmom.states.metadata import AngularMomentumMetadata, CouplingRecord, JComponent
from angmom.states.vector import StateVector, as_state

__all__ = [
    "AngularMomentumMetadata",
    "CouplingRecord",
    "JComponent",
    "StateVector",
    "as_state",
]
