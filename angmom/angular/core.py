"""Angular-momentum eigenstates and operator matrices.

Basis convention (used by every routine in :mod:`angmom.angular`): in a
(2j+1)-dimensional space the component |j,m> lives at index
``(2j+1) - 1 - (j + m)``, i.e. m = +j at index 0 and m = -j last.
"""

from __future__ import annotations

import math
import re

import numpy as np

from angmom.numeric import from_twos, to_twos
from angmom.operators.matrix import MatrixOperator
from angmom.states.metadata import AngularMomentumMetadata
from angmom.states.vector import StateVector

_ANGULAR_LABEL = re.compile(r"\|\d+(/\d+)?(\.\d+)?,[-+]?\d+(/\d+)?(\.\d+)?⟩")
_COMPUTATIONAL_LABEL = re.compile(r"\|\d+⟩")


def validate_j(j: float) -> int:
    """Raise ``ValueError`` unless j is a non-negative (half-)integer; return 2j."""

    tj = to_twos(j, name="j")
    if tj < 0:
        raise ValueError(f"angular momentum j must be non-negative, got {j!r}")
    return tj


def valid_m_values(j: float) -> list[float]:
    """m = j, j-1, ..., -j (basis order)."""

    tj = validate_j(j)
    return [from_twos(tm) for tm in range(tj, -tj - 1, -2)]


def is_valid_m(j: float, m: float) -> bool:
    """True if m belongs to {-j, -j+1, ..., j}; raises on invalid j."""

    tj = validate_j(j)
    xf = float(m)
    if not math.isfinite(xf):
        return False
    tm = int(round(2.0 * xf))
    if abs(2.0 * xf - tm) > 1e-10:
        return False
    return abs(tm) <= tj and (tj - tm) % 2 == 0


def _m_twos(j: float, m: float) -> tuple[int, int]:
    tj = validate_j(j)
    if not is_valid_m(j, m):
        raise ValueError(f"invalid m={m} for j={j}")
    return tj, int(round(2.0 * float(m)))


def basis_index(j: float, m: float) -> int:
    """Array index of |j,m>."""

    tj, tm = _m_twos(j, m)
    return (tj - tm) // 2


def _fmt(x: float) -> str:
    t = int(round(2.0 * float(x)))
    return str(t // 2) if t % 2 == 0 else f"{t}/2"


def create_eigenstate(j: float, m: float) -> StateVector:
    """Normalized eigenstate |j,m> with single-step metadata."""

    tj, tm = _m_twos(j, m)
    dim = tj + 1
    amps = np.zeros(dim, dtype=np.complex128)
    amps[(tj - tm) // 2] = 1.0
    return StateVector(
        amps,
        label=f"|{_fmt(j)},{_fmt(m)}⟩",
        metadata=AngularMomentumMetadata.single(from_twos(tj)),
    )


def computational_to_angular_basis(state: StateVector, j: float) -> StateVector:
    """Reorder |n> (n = m + j) into the angular-momentum basis order."""

    tj = validate_j(j)
    dim = tj + 1
    if state.dimension != dim:
        raise ValueError(f"state dimension {state.dimension} does not match 2j+1 = {dim}")
    return StateVector(state.amplitudes[::-1], label="angular")


def angular_to_computational_basis(state: StateVector, j: float) -> StateVector:
    """Inverse of :func:`computational_to_angular_basis`."""

    tj = validate_j(j)
    dim = tj + 1
    if state.dimension != dim:
        raise ValueError(f"state dimension {state.dimension} does not match 2j+1 = {dim}")
    return StateVector(state.amplitudes[::-1], label="computational")


def identify_basis(state: StateVector) -> str:
    """Guess the basis from the label: 'angular', 'computational' or 'unknown'."""

    text = str(state.label)
    if text == "angular" or _ANGULAR_LABEL.search(text):
        return "angular"
    if text == "computational" or _COMPUTATIONAL_LABEL.search(text):
        return "computational"
    return "unknown"


def create_raising_operator(j: float) -> MatrixOperator:
    """J+ with <j,m+1|J+|j,m> = sqrt(j(j+1) - m(m+1))."""

    tj = validate_j(j)
    jf = from_twos(tj)
    dim = tj + 1
    mat = np.zeros((dim, dim), dtype=np.complex128)
    for tm in range(-tj, tj, 2):
        m = from_twos(tm)
        src = (tj - tm) // 2
        dst = (tj - tm - 2) // 2
        mat[dst, src] = math.sqrt(jf * (jf + 1.0) - m * (m + 1.0))
    return MatrixOperator(mat, "general", j=jf)


def create_lowering_operator(j: float) -> MatrixOperator:
    """J- with <j,m-1|J-|j,m> = sqrt(j(j+1) - m(m-1))."""

    tj = validate_j(j)
    jf = from_twos(tj)
    dim = tj + 1
    mat = np.zeros((dim, dim), dtype=np.complex128)
    for tm in range(-tj + 2, tj + 1, 2):
        m = from_twos(tm)
        src = (tj - tm) // 2
        dst = (tj - tm + 2) // 2
        mat[dst, src] = math.sqrt(jf * (jf + 1.0) - m * (m - 1.0))
    return MatrixOperator(mat, "general", j=jf)


def create_z_operator(j: float) -> MatrixOperator:
    tj = validate_j(j)
    diag = [from_twos(tm) for tm in range(tj, -tj - 1, -2)]
    return MatrixOperator(np.diag(np.asarray(diag, dtype=np.complex128)), "hermitian", j=from_twos(tj))


def create_x_operator(j: float) -> MatrixOperator:
    """Jx = (J+ + J-)/2."""

    jx = create_raising_operator(j).add(create_lowering_operator(j)).scale(0.5)
    return MatrixOperator(jx.to_matrix(), "hermitian", j=jx.j)


def create_y_operator(j: float) -> MatrixOperator:
    """Jy = (J+ - J-)/(2i)."""

    jy = create_raising_operator(j).add(create_lowering_operator(j).scale(-1.0)).scale(-0.5j)
    return MatrixOperator(jy.to_matrix(), "hermitian", j=jy.j)


def create_total_j_squared_operator(j: float) -> MatrixOperator:
    """J^2 = j(j+1) * identity."""

    tj = validate_j(j)
    jf = from_twos(tj)
    return MatrixOperator(np.eye(tj + 1, dtype=np.complex128) * (jf * (jf + 1.0)), "hermitian", j=jf)


def create_total_j_squared_from_components(j: float) -> MatrixOperator:
    """J^2 assembled as J+J- + Jz^2 - Jz; agrees with :func:`create_total_j_squared_operator`."""

    jp = create_raising_operator(j)
    jm = create_lowering_operator(j)
    jz = create_z_operator(j)
    out = jp.compose(jm).add(jz.compose(jz)).add(jz.scale(-1.0))
    return MatrixOperator(out.to_matrix(), "hermitian", j=out.j)


def create_rotation_operator(j: float, alpha: float, beta: float, gamma: float) -> MatrixOperator:
    """Wigner rotation D(α,β,γ) = exp(-iαJz) exp(-iβJy) exp(-iγJz)."""

    jz = create_z_operator(j)
    jy = create_y_operator(j)
    exp_alpha = jz.scale(-1j * float(alpha)).expm()
    exp_beta = jy.scale(-1j * float(beta)).expm()
    exp_gamma = jz.scale(-1j * float(gamma)).expm()
    return exp_alpha.compose(exp_beta).compose(exp_gamma)


def create_coherent_state(j: float, theta: float, phi: float) -> StateVector:
    """Spin coherent state |j; θ, φ> = D(φ, θ, 0)|j,j>."""

    tj = validate_j(j)
    top = create_eigenstate(from_twos(tj), from_twos(tj))
    rot = create_rotation_operator(from_twos(tj), float(phi), float(theta), 0.0)
    return rot.apply(top).with_label(f"|{_fmt(j)};θ={float(theta):.4g},φ={float(phi):.4g}⟩").with_metadata(
        AngularMomentumMetadata.single(from_twos(tj))
    )


def jm_expectation_value(operator: MatrixOperator, j: float, m: float) -> complex:
    """<j,m|O|j,m>."""

    return operator.expectation_value(create_eigenstate(j, m))
