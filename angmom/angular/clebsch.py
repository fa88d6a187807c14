"""Clebsch-Gordan coefficients <j1 m1; j2 m2 | j m> (Condon-Shortley phase).

Coefficients are evaluated with Racah's formula in log-space and stored in
sparse per-(j1, j2) tables. A table is generated in full the first time any
coefficient of its (j1, j2) pair is requested and is read-only afterwards.

Out-of-domain arguments (invalid j/m, selection rules violated) give exactly
``0.0``; they never raise.
"""

from __future__ import annotations

import math
import threading
from types import MappingProxyType
from typing import Mapping

from angmom.config import get_config, vlog
from angmom.numeric import (
    NEGLIGIBLE_TOL,
    from_twos,
    log_factorial,
    log_tri_delta_twos,
    to_twos,
    twos_or_none,
)

# (2*m1, 2*m2, 2*j, 2*m) -> coefficient
CGTable = Mapping[tuple[int, int, int, int], float]

_INV_SQRT2 = 1.0 / math.sqrt(2.0)


def _m_ok_twos(tj: int, tm: int) -> bool:
    return tj >= 0 and abs(tm) <= tj and ((tj - tm) & 1) == 0


def is_zero_cg_twos(tj1: int, tm1: int, tj2: int, tm2: int, tj: int, tm: int) -> bool:
    """Selection rules on doubled-integer arguments."""

    if tm != tm1 + tm2:
        return True
    if tj > tj1 + tj2 or tj < abs(tj1 - tj2):
        return True
    if ((tj1 + tj2 + tj) & 1) != 0:
        return True
    if not (_m_ok_twos(tj1, tm1) and _m_ok_twos(tj2, tm2) and _m_ok_twos(tj, tm)):
        return True
    return False


def is_zero_cg(j1: float, m1: float, j2: float, m2: float, j: float, m: float) -> bool:
    """True when the coefficient vanishes by selection rules or invalid input."""

    twos = [twos_or_none(x) for x in (j1, m1, j2, m2, j, m)]
    if any(t is None for t in twos):
        return True
    return is_zero_cg_twos(*twos)  # type: ignore[arg-type]


def validate_coupling_numbers(j1: float, m1: float, j2: float, m2: float, j: float, m: float) -> None:
    """Raising counterpart of :func:`is_zero_cg` for callers that want hard errors."""

    tj1 = to_twos(j1, name="j1")
    tj2 = to_twos(j2, name="j2")
    tj = to_twos(j, name="j")
    for name, t in (("j1", tj1), ("j2", tj2), ("j", tj)):
        if t < 0:
            raise ValueError(f"{name} must be non-negative")
    for jname, tjx, mname, mx in (("j1", tj1, "m1", m1), ("j2", tj2, "m2", m2), ("j", tj, "m", m)):
        tmx = twos_or_none(mx)
        if tmx is None or not _m_ok_twos(tjx, tmx):
            raise ValueError(f"invalid {mname}={mx} for {jname}={from_twos(tjx)}")
    if tj < abs(tj1 - tj2) or tj > tj1 + tj2 or ((tj1 + tj2 + tj) & 1):
        raise ValueError(
            f"total angular momentum j={j} must satisfy |j1-j2| <= j <= j1+j2 in integer steps "
            f"(j1={j1}, j2={j2})"
        )
    if abs(float(m) - (float(m1) + float(m2))) > 1e-10:
        raise ValueError(f"m={m} must equal m1+m2={float(m1) + float(m2)}")


def racah_cg_twos(tj1: int, tm1: int, tj2: int, tm2: int, tj: int, tm: int) -> float:
    """Evaluate one coefficient from Racah's formula (no caching)."""

    if is_zero_cg_twos(tj1, tm1, tj2, tm2, tj, tm):
        return 0.0

    # Two spin-1/2 singlet: exact +-1/sqrt(2).
    if tj1 == 1 and tj2 == 1 and tj == 0:
        return _INV_SQRT2 if tm1 > 0 else -_INV_SQRT2
    # Stretched state |j1+j2, j1+j2> = |j1 j1>|j2 j2>.
    if tj == tj1 + tj2 and tm1 == tj1 and tm2 == tj2:
        return 1.0

    j1pj2mj = (tj1 + tj2 - tj) // 2
    j1mm1 = (tj1 - tm1) // 2
    j2pm2 = (tj2 + tm2) // 2
    jmj2pm1 = (tj - tj2 + tm1) // 2
    jmj1mm2 = (tj - tj1 - tm2) // 2

    k_min = max(0, -jmj2pm1, -jmj1mm2)
    k_max = min(j1pj2mj, j1mm1, j2pm2)
    if k_min > k_max:
        return 0.0

    log_pref = 0.5 * math.log(tj + 1.0) + log_tri_delta_twos(tj1, tj2, tj)
    log_pref += 0.5 * (
        log_factorial((tj + tm) // 2)
        + log_factorial((tj - tm) // 2)
        + log_factorial((tj1 - tm1) // 2)
        + log_factorial((tj1 + tm1) // 2)
        + log_factorial((tj2 - tm2) // 2)
        + log_factorial((tj2 + tm2) // 2)
    )

    s = 0.0
    for k in range(k_min, k_max + 1):
        args = (k, j1pj2mj - k, j1mm1 - k, j2pm2 - k, jmj2pm1 + k, jmj1mm2 + k)
        if min(args) < 0:
            continue
        term = math.exp(log_pref - sum(log_factorial(a) for a in args))
        if not math.isfinite(term):
            continue
        s += -term if (k & 1) else term
    return float(s)


def generate_cg_table(tj1: int, tj2: int) -> CGTable:
    """Sweep every valid (j, m, m1) for the pair and keep non-negligible entries."""

    tj1 = int(tj1)
    tj2 = int(tj2)
    table: dict[tuple[int, int, int, int], float] = {}
    for tj in range(abs(tj1 - tj2), tj1 + tj2 + 1, 2):
        for tm in range(-tj, tj + 1, 2):
            for tm1 in range(-tj1, tj1 + 1, 2):
                tm2 = tm - tm1
                if abs(tm2) > tj2:
                    continue
                if is_zero_cg_twos(tj1, tm1, tj2, tm2, tj, tm):
                    continue
                c = racah_cg_twos(tj1, tm1, tj2, tm2, tj, tm)
                if abs(c) > NEGLIGIBLE_TOL:
                    table[(tm1, tm2, tj, tm)] = c
    vlog(2, f"CG table j1={from_twos(tj1)} j2={from_twos(tj2)}: {len(table)} non-zero entries")
    return MappingProxyType(table)


class ClebschGordanCache:
    """Compute-once store of sparse CG tables keyed by ``(2*j1, 2*j2)``.

    Tables are built outside the lock and published with a single
    insert-if-absent under it, so concurrent first requests for the same pair
    may both compute but all callers observe one complete, read-only table.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tables: dict[tuple[int, int], CGTable] = {}

    def table_twos(self, tj1: int, tj2: int) -> CGTable:
        key = (int(tj1), int(tj2))
        hit = self._tables.get(key)
        if hit is not None:
            return hit
        built = generate_cg_table(*key)
        with self._lock:
            return self._tables.setdefault(key, built)

    def table(self, j1: float, j2: float) -> CGTable:
        return self.table_twos(to_twos(j1, name="j1"), to_twos(j2, name="j2"))

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()

    def keys(self) -> list[tuple[int, int]]:
        with self._lock:
            return list(self._tables.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._tables

    def __len__(self) -> int:
        return len(self._tables)


_CG_CACHE = ClebschGordanCache()


def get_cg_cache() -> ClebschGordanCache:
    return _CG_CACHE


def cg_table_twos(tj1: int, tj2: int, *, cache: ClebschGordanCache | None = None) -> CGTable:
    """Sparse table for a pair, honoring ``use_cg_cache`` when no cache is injected."""

    if cache is not None:
        return cache.table_twos(tj1, tj2)
    if not get_config().use_cg_cache:
        return generate_cg_table(tj1, tj2)
    return _CG_CACHE.table_twos(tj1, tj2)


def cg_table(j1: float, j2: float, *, cache: ClebschGordanCache | None = None) -> dict[tuple[float, float, float, float], float]:
    """The full sparse table for (j1, j2) keyed by ``(m1, m2, j, m)`` floats."""

    tj1 = to_twos(j1, name="j1")
    tj2 = to_twos(j2, name="j2")
    if tj1 < 0 or tj2 < 0:
        raise ValueError("j1 and j2 must be non-negative")
    tab = cg_table_twos(tj1, tj2, cache=cache)
    return {
        (from_twos(tm1), from_twos(tm2), from_twos(tj), from_twos(tm)): c
        for (tm1, tm2, tj, tm), c in tab.items()
    }


def clebsch_gordan(
    j1: float,
    m1: float,
    j2: float,
    m2: float,
    j: float,
    m: float,
    *,
    cache: ClebschGordanCache | None = None,
) -> float:
    """<j1 m1; j2 m2 | j m>; exactly 0.0 outside the selection rules."""

    twos = [twos_or_none(x) for x in (j1, m1, j2, m2, j, m)]
    if any(t is None for t in twos):
        return 0.0
    tj1, tm1, tj2, tm2, tj, tm = twos  # type: ignore[misc]
    if is_zero_cg_twos(tj1, tm1, tj2, tm2, tj, tm):
        return 0.0
    return float(cg_table_twos(tj1, tj2, cache=cache).get((tm1, tm2, tj, tm), 0.0))
