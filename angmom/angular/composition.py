"""Coupling of two angular-momentum states into the total-J basis.

Composite layout: blocks of descending J (j1+j2 down to |j1-j2|), each block
holding its 2J+1 amplitudes in descending M, i.e. the single-eigenstate basis
convention repeated per block.
"""

from __future__ import annotations

import numpy as np

from angmom.angular.clebsch import ClebschGordanCache, cg_table_twos
from angmom.angular.core import validate_j
from angmom.config import vlog
from angmom.numeric import NEGLIGIBLE_TOL, from_twos
from angmom.states.metadata import AngularMomentumMetadata, CouplingRecord, JComponent
from angmom.states.vector import StateVector


def _fmt(t: int) -> str:
    return str(t // 2) if t % 2 == 0 else f"{t}/2"


def block_layout(j1: float, j2: float) -> list[tuple[float, int, int]]:
    """``(J, start_index, dimension)`` for every J block of the j1 x j2 coupling."""

    tj1 = validate_j(j1)
    tj2 = validate_j(j2)
    out: list[tuple[float, int, int]] = []
    start = 0
    for tj in range(tj1 + tj2, abs(tj1 - tj2) - 1, -2):
        out.append((from_twos(tj), start, tj + 1))
        start += tj + 1
    return out


def couple(
    state_a: StateVector,
    j1: float,
    state_b: StateVector,
    j2: float,
    *,
    cache: ClebschGordanCache | None = None,
) -> StateVector:
    """Couple |a> (spin j1) and |b> (spin j2) into the descending-J block basis.

    Amplitude of |J, M> is ``sum_{m1} a[m1] * b[M-m1] * <j1 m1; j2 M-m1 | J M>``.
    The result is normalized; its metadata records only the J blocks that hold
    at least one amplitude above ``NEGLIGIBLE_TOL``.
    """

    tj1 = validate_j(j1)
    tj2 = validate_j(j2)
    dim1 = tj1 + 1
    dim2 = tj2 + 1
    if state_a.dimension != dim1:
        raise ValueError(
            f"state 1 dimension {state_a.dimension} does not match angular momentum "
            f"j1={from_twos(tj1)} (expected {dim1})"
        )
    if state_b.dimension != dim2:
        raise ValueError(
            f"state 2 dimension {state_b.dimension} does not match angular momentum "
            f"j2={from_twos(tj2)} (expected {dim2})"
        )

    table = cg_table_twos(tj1, tj2, cache=cache)
    amp_a = state_a.amplitudes
    amp_b = state_b.amplitudes

    tj_max = tj1 + tj2
    tj_min = abs(tj1 - tj2)
    out = np.zeros(dim1 * dim2, dtype=np.complex128)
    pos = 0
    best = (-1.0, tj_min, -tj_min)
    for tj in range(tj_max, tj_min - 1, -2):
        for tm in range(tj, -tj - 1, -2):
            acc = 0.0 + 0.0j
            for tm1 in range(-tj1, tj1 + 1, 2):
                tm2 = tm - tm1
                if abs(tm2) > tj2:
                    continue
                c = table.get((tm1, tm2, tj, tm))
                if c is None:
                    continue
                acc += amp_a[(tj1 - tm1) // 2] * amp_b[(tj2 - tm2) // 2] * c
            out[pos] = acc
            if abs(acc) > best[0]:
                best = (abs(acc), tj, tm)
            pos += 1

    label = f"|({_fmt(tj1)},{_fmt(tj2)}),{_fmt(best[1])},{_fmt(best[2])}⟩"
    result = StateVector(out, label=label).normalize()

    components: dict[float, JComponent] = {}
    start = 0
    for tj in range(tj_max, tj_min - 1, -2):
        dim = tj + 1
        block = result.amplitudes[start : start + dim]
        if np.any(np.abs(block) > NEGLIGIBLE_TOL):
            components[from_twos(tj)] = JComponent(j=from_twos(tj), start_index=start, dimension=dim)
        start += dim

    hist_a = state_a.metadata.coupling_history if state_a.metadata is not None else ()
    hist_b = state_b.metadata.coupling_history if state_b.metadata is not None else ()
    record = CouplingRecord(
        kind="coupling",
        j1=from_twos(tj1),
        j2=from_twos(tj2),
        result_j=tuple(from_twos(tj) for tj in range(tj_min, tj_max + 1, 2)),
    )
    jf_max = from_twos(tj_max)
    metadata = AngularMomentumMetadata(
        total_j=jf_max,
        m_range=(-jf_max, jf_max),
        coupling_history=(*hist_a, *hist_b, record),
        j_components=components,
        is_composite=True,
    )
    vlog(
        1,
        f"couple j1={from_twos(tj1)} j2={from_twos(tj2)}: present J={list(components)} "
        f"(allowed {list(record.result_j)})",
    )
    return result.with_metadata(metadata)


def decompose_to_uncoupled(
    state: StateVector,
    j1: float,
    j2: float,
    *,
    cache: ClebschGordanCache | None = None,
) -> StateVector:
    """Map a coupled (descending-J block) state back to the product basis.

    Product index of |j1 m1>|j2 m2> is ``idx1 * (2j2+1) + idx2`` with the
    per-spin basis convention, matching :meth:`StateVector.tensor`.
    """

    tj1 = validate_j(j1)
    tj2 = validate_j(j2)
    dim1 = tj1 + 1
    dim2 = tj2 + 1
    if state.dimension != dim1 * dim2:
        raise ValueError(
            f"state dimension {state.dimension} does not match (2j1+1)(2j2+1) = {dim1 * dim2}"
        )

    table = cg_table_twos(tj1, tj2, cache=cache)
    amps = state.amplitudes
    out = np.zeros(dim1 * dim2, dtype=np.complex128)
    pos = 0
    for tj in range(tj1 + tj2, abs(tj1 - tj2) - 1, -2):
        for tm in range(tj, -tj - 1, -2):
            amp = amps[pos]
            pos += 1
            if abs(amp) <= NEGLIGIBLE_TOL:
                continue
            for tm1 in range(-tj1, tj1 + 1, 2):
                tm2 = tm - tm1
                if abs(tm2) > tj2:
                    continue
                c = table.get((tm1, tm2, tj, tm))
                if c is None:
                    continue
                out[((tj1 - tm1) // 2) * dim2 + (tj2 - tm2) // 2] += amp * c
    return StateVector(out, label="|j1,m1⟩|j2,m2⟩")
