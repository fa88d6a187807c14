"""Numeric kernel: memoized (log-)factorials, triangle coefficients and the
doubled-integer ("twos") representation of angular-momentum quantum numbers.

Every j or m that enters the library is converted once to ``2*j`` / ``2*m``
integers; all selection rules and factorial arguments are then exact integer
arithmetic.
"""

from __future__ import annotations

import functools
import math
from typing import Final

# Equality / zero-norm checks on states.
EQ_TOL: Final[float] = 1e-10
ZERO_NORM_TOL: Final[float] = 1e-10
# Negligible amplitudes in sparse CG tables and J-block presence scans.
NEGLIGIBLE_TOL: Final[float] = 1e-12
# |2x - round(2x)| allowed when reading a half-integer.
TWOS_TOL: Final[float] = 1e-10


def twos_or_none(x: float) -> int | None:
    """``2*x`` as an int, or ``None`` when x is not a finite (half-)integer.

    Zero-by-convention callers (CG, 3j, 6j) use this directly; everything
    that must reject bad input goes through :func:`to_twos`.
    """

    try:
        doubled = 2.0 * float(x)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(doubled):
        return None
    t = round(doubled)
    return int(t) if abs(doubled - t) <= TWOS_TOL else None


def to_twos(x: float, *, name: str = "j") -> int:
    """Raising counterpart of :func:`twos_or_none`."""

    t = twos_or_none(x)
    if t is None:
        raise ValueError(f"{name} must be a finite integer or half-integer, got {x!r}")
    return t


def from_twos(t: int) -> float:
    return 0.5 * float(t)


@functools.lru_cache(maxsize=4096)
def log_factorial(n: int) -> float:
    """log(n!) via lgamma; every Racah sum in the package goes through here."""

    n = int(n)
    if n < 0:
        raise ValueError(f"log_factorial is undefined for n={n}")
    return math.lgamma(n + 1.0)


@functools.lru_cache(maxsize=256)
def factorial(n: int) -> float:
    """n! as a float (exact integer factorial converted once, then cached)."""

    n = int(n)
    if n < 0:
        raise ValueError("factorial not defined for negative numbers")
    if n > 170:
        raise ValueError("factorial too large for direct computation (n > 170)")
    return float(math.factorial(n))


def tri_ok_twos(tj1: int, tj2: int, tj3: int) -> bool:
    """Triangle rule with integer perimeter, on doubled-integer inputs."""

    tj1, tj2, tj3 = int(tj1), int(tj2), int(tj3)
    if min(tj1, tj2, tj3) < 0 or (tj1 + tj2 + tj3) % 2:
        return False
    return abs(tj1 - tj2) <= tj3 <= tj1 + tj2


def log_tri_delta_twos(tj1: int, tj2: int, tj3: int) -> float:
    """log Δ(j1,j2,j3); ``-inf`` when the triangle rule fails.

    With p = j1+j2+j3, Δ^2 = (p-2j1)! (p-2j2)! (p-2j3)! / (p+1)!.
    """

    if not tri_ok_twos(tj1, tj2, tj3):
        return -math.inf
    p = (int(tj1) + int(tj2) + int(tj3)) // 2
    num = math.fsum(log_factorial(p - int(t)) for t in (tj1, tj2, tj3))
    return 0.5 * (num - log_factorial(p + 1))


def tri_delta_twos(tj1: int, tj2: int, tj3: int) -> float:
    lg = log_tri_delta_twos(tj1, tj2, tj3)
    return 0.0 if lg == -math.inf else math.exp(lg)


def triangle_coefficient(a: float, b: float, c: float) -> float:
    """Δ(a,b,c) = sqrt((a+b-c)!(a-b+c)!(-a+b+c)!/(a+b+c+1)!), zero off-triangle."""

    ta, tb, tc = twos_or_none(a), twos_or_none(b), twos_or_none(c)
    if ta is None or tb is None or tc is None:
        return 0.0
    return tri_delta_twos(ta, tb, tc)


def phase_from_twos(exp_twos: int) -> float:
    """(-1)**(exp_twos/2); the doubled exponent must be even."""

    exp_twos = int(exp_twos)
    if exp_twos % 2:
        raise ValueError(f"phase exponent {exp_twos}/2 is not an integer")
    return 1.0 - 2.0 * ((exp_twos // 2) % 2)
