"""J-component analysis and extraction for composite angular-momentum states.

States produced by :func:`angmom.angular.composition.couple` carry metadata
locating every present J block; those are read directly. States without
metadata need the ``(j1, j2)`` pair of the coupling that produced them so the
block positions can be recomputed from the descending-J layout.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from angmom.angular.composition import block_layout
from angmom.numeric import ZERO_NORM_TOL, from_twos, to_twos
from angmom.states.metadata import AngularMomentumMetadata
from angmom.states.vector import StateVector


@dataclass(frozen=True)
class JComponentInfo:
    j: float
    dimension: int
    magnitude: float
    # m -> amplitude, m from +j down to -j
    m_amplitudes: dict[float, complex] = field(default_factory=dict)
    is_present: bool = False


@dataclass(frozen=True)
class AngularStateAnalysis:
    is_angular_momentum: bool
    components: dict[float, JComponentInfo]
    dominant_j: float | None
    is_pure: bool
    coupling_info: tuple[float, float] | None = None

    @property
    def present_j(self) -> list[float]:
        return [j for j, info in self.components.items() if info.is_present]


@dataclass(frozen=True)
class ExtractedComponent:
    state: StateVector
    j: float
    normalization_factor: float
    original_magnitude: float


def _check_coupled_dimension(state: StateVector, j1: float, j2: float) -> None:
    expected = (to_twos(j1, name="j1") + 1) * (to_twos(j2, name="j2") + 1)
    if state.dimension != expected:
        raise ValueError(
            f"state dimension {state.dimension} does not match (2j1+1)(2j2+1) = {expected}"
        )


def _block_info(state: StateVector, j: float, start: int, dim: int) -> JComponentInfo:
    block = state.amplitudes[start : start + dim]
    if block.size != dim:
        raise ValueError(
            f"J={j} block [{start}, {start + dim}) exceeds state dimension {state.dimension}"
        )
    tj = to_twos(j)
    m_amps = {from_twos(tj - 2 * i): complex(block[i]) for i in range(dim)}
    magnitude = float(np.linalg.norm(block))
    return JComponentInfo(
        j=from_twos(tj),
        dimension=dim,
        magnitude=magnitude,
        m_amplitudes=m_amps,
        is_present=magnitude > ZERO_NORM_TOL,
    )


def _summarize(components: dict[float, JComponentInfo], coupling_info) -> AngularStateAnalysis:
    dominant_j = None
    dominant_mag = 0.0
    for j, info in components.items():
        if info.is_present and info.magnitude > dominant_mag:
            dominant_mag = info.magnitude
            dominant_j = j
    n_present = sum(1 for info in components.values() if info.is_present)
    return AngularStateAnalysis(
        is_angular_momentum=True,
        components=components,
        dominant_j=dominant_j,
        is_pure=n_present == 1,
        coupling_info=coupling_info,
    )


def _coupling_info_from_metadata(meta: AngularMomentumMetadata) -> tuple[float, float] | None:
    rec = meta.latest_coupling()
    if rec is None:
        return None
    return (float(rec.j1), float(rec.j2))  # type: ignore[arg-type]


def analyze(state: StateVector, j1: float | None = None, j2: float | None = None) -> AngularStateAnalysis:
    """Magnitude of every candidate J block, the dominant J and purity.

    Candidates come from the state's metadata when present, otherwise from the
    triangle range of ``(j1, j2)``. Without either, the result reports
    ``is_angular_momentum=False``.
    """

    meta = state.metadata
    if meta is not None:
        components = {
            j: _block_info(state, j, c.start_index, c.dimension) for j, c in meta.j_components.items()
        }
        return _summarize(components, _coupling_info_from_metadata(meta))

    if j1 is None or j2 is None:
        return AngularStateAnalysis(
            is_angular_momentum=False, components={}, dominant_j=None, is_pure=False
        )

    _check_coupled_dimension(state, j1, j2)
    layout = block_layout(j1, j2)
    components = {j: _block_info(state, j, start, dim) for j, start, dim in layout}
    return _summarize(components, (from_twos(to_twos(j1)), from_twos(to_twos(j2))))


def _locate(state: StateVector, target_j: float, j1: float | None, j2: float | None) -> tuple[int, int] | None:
    meta = state.metadata
    if meta is not None:
        comp = meta.component(target_j)
        if comp is None:
            return None
        return comp.start_index, comp.dimension

    if j1 is None or j2 is None:
        raise ValueError("state carries no angular-momentum metadata; pass the j1, j2 that produced it")
    _check_coupled_dimension(state, j1, j2)
    target_t = to_twos(target_j, name="target_j")
    for j, start, dim in block_layout(j1, j2):
        if to_twos(j) == target_t:
            return start, dim
    return None


def extract_component_details(
    state: StateVector,
    target_j: float,
    j1: float | None = None,
    j2: float | None = None,
) -> ExtractedComponent | None:
    """Extract the J = target_j block as a normalized pure state.

    Returns ``None`` when the block is structurally absent or its norm is
    below ``ZERO_NORM_TOL``.
    """

    loc = _locate(state, target_j, j1, j2)
    if loc is None:
        return None
    start, dim = loc
    block = np.asarray(state.amplitudes[start : start + dim])
    if block.size != dim:
        return None
    magnitude = float(np.linalg.norm(block))
    if magnitude < ZERO_NORM_TOL:
        return None

    jf = from_twos(to_twos(target_j))
    label = f"|{int(jf)}⟩" if float(jf).is_integer() else f"|{to_twos(jf)}/2⟩"
    pure = StateVector(block / magnitude, label=label, metadata=AngularMomentumMetadata.single(jf))
    return ExtractedComponent(
        state=pure,
        j=jf,
        normalization_factor=1.0 / magnitude,
        original_magnitude=magnitude,
    )


def extract_component(
    state: StateVector,
    target_j: float,
    j1: float | None = None,
    j2: float | None = None,
) -> StateVector | None:
    """Pure J eigenstate extracted from a composite state, or ``None`` if absent."""

    out = extract_component_details(state, target_j, j1, j2)
    return None if out is None else out.state


def has_angular_momentum_data(state: StateVector) -> bool:
    return state.metadata is not None


def get_coupling_info(state: StateVector) -> tuple[float, float] | None:
    """``(j1, j2)`` of the latest coupling that produced the state, if recorded."""

    if state.metadata is None:
        return None
    return _coupling_info_from_metadata(state.metadata)


def analysis_to_string(analysis: AngularStateAnalysis) -> str:
    if not analysis.is_angular_momentum:
        return "Not an angular momentum state"
    lines = [
        "Angular Momentum State Analysis:",
        f"  Type: {'Pure' if analysis.is_pure else 'Mixed'} state",
        f"  Dominant J: {analysis.dominant_j}",
    ]
    if analysis.coupling_info is not None:
        lines.append(f"  Original coupling: j1={analysis.coupling_info[0]}, j2={analysis.coupling_info[1]}")
    lines.append("  Components:")
    for j, info in analysis.components.items():
        if info.is_present:
            lines.append(f"    J={j}: magnitude={info.magnitude:.4f}, dim={info.dimension}")
    return "\n".join(lines) + "\n"
