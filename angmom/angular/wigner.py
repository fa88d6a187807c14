from __future__ import annotations

import math
import warnings
from dataclasses import dataclass

from angmom.angular.clebsch import ClebschGordanCache, clebsch_gordan
from angmom.numeric import (
    from_twos,
    log_factorial,
    log_tri_delta_twos,
    phase_from_twos,
    tri_ok_twos,
    twos_or_none,
)

# operation % 6 -> permutation of the three columns
_PERMUTATIONS: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),  # identity
    (1, 2, 0),  # cyclic
    (2, 0, 1),  # cyclic
    (1, 0, 2),  # odd
    (0, 2, 1),  # odd
    (2, 1, 0),  # odd
)


def is_valid_triangle(j1: float, j2: float, j3: float) -> bool:
    """|j1-j2| <= j3 <= j1+j2 with j1+j2+j3 an integer."""

    t = [twos_or_none(x) for x in (j1, j2, j3)]
    if any(x is None for x in t):
        return False
    return tri_ok_twos(*t)  # type: ignore[arg-type]


def _m_ok_twos(tj: int, tm: int) -> bool:
    return abs(tm) <= tj and ((tj - tm) & 1) == 0


def _wigner3j_args_ok(tj: list[int], tm: list[int]) -> bool:
    if any(t < 0 for t in tj):
        return False
    if not all(_m_ok_twos(a, b) for a, b in zip(tj, tm)):
        return False
    if not tri_ok_twos(*tj):
        return False
    return sum(tm) == 0


def wigner3j(
    j1: float,
    j2: float,
    j3: float,
    m1: float,
    m2: float,
    m3: float,
    *,
    cache: ClebschGordanCache | None = None,
) -> float:
    """Wigner 3j symbol (j1 j2 j3; m1 m2 m3) from the CG coefficient.

    (j1 j2 j3; m1 m2 m3) = (-1)^(j1-j2-m3) / sqrt(2j3+1) * <j1 m1; j2 m2 | j3, -m3>.
    The CG coefficient is evaluated at **-m3**.
    """

    tj = [twos_or_none(x) for x in (j1, j2, j3)]
    tm = [twos_or_none(x) for x in (m1, m2, m3)]
    if any(x is None for x in tj) or any(x is None for x in tm):
        return 0.0
    if not _wigner3j_args_ok(tj, tm):  # type: ignore[arg-type]
        return 0.0
    tj1, tj2, tj3 = tj  # type: ignore[misc]
    tm1, tm2, tm3 = tm  # type: ignore[misc]

    cg = clebsch_gordan(
        from_twos(tj1), from_twos(tm1), from_twos(tj2), from_twos(tm2), from_twos(tj3), from_twos(-tm3),
        cache=cache,
    )
    if cg == 0.0:
        return 0.0
    phase = phase_from_twos(tj1 - tj2 - tm3)
    return float(phase * cg / math.sqrt(tj3 + 1.0))


@dataclass(frozen=True)
class Wigner3jSymmetry:
    """Permuted symbol ``value`` and the ``phase`` with original == phase * value."""

    value: float
    phase: float
    arguments: tuple[float, float, float, float, float, float]


def wigner3j_symmetry(
    j1: float,
    j2: float,
    j3: float,
    m1: float,
    m2: float,
    m3: float,
    operation: int,
) -> Wigner3jSymmetry:
    """Recompute the symbol under one of its 12 classical symmetries.

    ``operation % 6`` selects a column permutation (0 identity, 1-2 cyclic,
    3-5 odd); ``operation >= 6`` additionally reverses the sign of all m.
    Odd permutations and sign reversal each contribute (-1)^(j1+j2+j3).
    """

    op = int(operation)
    if not 0 <= op < 12:
        raise ValueError(f"symmetry operation must be in 0..11, got {operation!r}")
    perm = _PERMUTATIONS[op % 6]
    flip = op >= 6
    js = (j1, j2, j3)
    ms = (m1, m2, m3)
    pj = tuple(float(js[i]) for i in perm)
    pm = tuple((-float(ms[i]) if flip else float(ms[i])) for i in perm)

    phase = 1.0
    t_sum = sum(twos_or_none(x) or 0 for x in js)
    if t_sum % 2 == 0:
        jphase = phase_from_twos(t_sum)
        if op % 6 >= 3:
            phase *= jphase
        if flip:
            phase *= jphase

    args = (*pj, *pm)
    return Wigner3jSymmetry(value=wigner3j(*args), phase=phase, arguments=args)  # type: ignore[arg-type]


def wigner6j(j1: float, j2: float, j3: float, l1: float, l2: float, l3: float) -> float:
    """Wigner 6j symbol {j1 j2 j3; l1 l2 l3} (Racah formula).

    {..} = Δ(j1 j2 j3) Δ(j1 l2 l3) Δ(l1 j2 l3) Δ(l1 l2 j3)
           * sum_z (-1)^z (z+1)! / [(z-a1)!(z-a2)!(z-a3)!(z-a4)!(b1-z)!(b2-z)!(b3-z)!]

    with a_i the four triad sums and b_k the three pair sums. The alternating
    sum is accumulated relative to its largest log-term so that no factorial
    is ever formed outside log-space.
    """

    t = [twos_or_none(x) for x in (j1, j2, j3, l1, l2, l3)]
    if any(x is None for x in t):
        return 0.0
    ta, tb, tc, td, te, tf = t  # type: ignore[misc]

    triads = ((ta, tb, tc), (ta, te, tf), (td, tb, tf), (td, te, tc))
    if not all(tri_ok_twos(*tr) for tr in triads):
        return 0.0
    log_deltas = [log_tri_delta_twos(*tr) for tr in triads]
    if any(ld == -math.inf for ld in log_deltas):
        return 0.0
    log_dprod = sum(log_deltas)

    x = [sum(tr) // 2 for tr in triads]
    y1 = (ta + tb + td + te) // 2
    y2 = (ta + tc + td + tf) // 2
    y3 = (tb + tc + te + tf) // 2

    z_min = max(x)
    z_max = min(y1, y2, y3)
    if z_min > z_max:
        return 0.0

    terms: list[tuple[float, float]] = []
    for z in range(z_min, z_max + 1):
        den = (
            sum(log_factorial(z - xi) for xi in x)
            + log_factorial(y1 - z)
            + log_factorial(y2 - z)
            + log_factorial(y3 - z)
        )
        log_term = log_factorial(z + 1) - den
        if not math.isfinite(log_term):
            continue
        terms.append((-1.0 if (z & 1) else 1.0, log_term))
    if not terms:
        return 0.0

    log_max = max(lt for _, lt in terms)
    s = math.fsum(sign * math.exp(lt - log_max) for sign, lt in terms)
    if s == 0.0:
        return 0.0
    return float(math.copysign(math.exp(log_dprod + log_max + math.log(abs(s))), s))


def wigner9j(
    j1: float,
    j2: float,
    j3: float,
    l1: float,
    l2: float,
    l3: float,
    k1: float,
    k2: float,
    k3: float,
) -> float:
    """Wigner 9j symbol; not implemented, always returns 0.0."""

    warnings.warn("wigner9j is not implemented; returning 0.0", stacklevel=2)
    return 0.0
